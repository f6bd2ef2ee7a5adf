import logging
from typing import Dict, List, Optional

import networkx as nx

from cfgnormal.context import NormalizationContext
from cfgnormal.errors import DeadNonterminalError
from cfgnormal.grammar import Grammar, Right, make_grammar

log = logging.getLogger(__name__)


def make_chain_graph(grammar: Grammar) -> nx.DiGraph:
  """
  :returns: graph with an edge A -> B for every chain production A ::= B
  """
  chain_graph = nx.DiGraph()
  chain_graph.add_nodes_from(grammar.non_terminals)
  for prod in grammar.prods:
    if prod.is_chain(grammar.non_terminals):
      chain_graph.add_edge(prod.left, prod.right[0])
  return chain_graph


def make_chain_closures(grammar: Grammar, chain_graph: Optional[nx.DiGraph] = None) -> Dict[str, List[str]]:
  """
  For each non-terminal A, all non-terminals B with A =>* B using only chain productions, including A itself.
  Each closure lists A first, then the others in the order they were found.
  """
  if chain_graph is None:
    chain_graph = make_chain_graph(grammar)
  closures: Dict[str, List[str]] = {left: [left] for left in grammar.non_terminals}
  changes = True
  while changes:
    changes = False
    for left in grammar.non_terminals:
      closure = closures[left]
      for target in chain_graph.successors(left):
        for reachable in closures[target]:
          if reachable not in closure:
            closure.append(reachable)
            changes = True
  return closures


def _get_chain_cycles(chain_graph, non_terminals):
  """
  :param nx.DiGraph chain_graph:
  :param list[str] non_terminals: in output order
  :return: chain cycles among `non_terminals`, each in the order of `non_terminals`
  :rtype: list[list[str]]
  """
  subgraph = chain_graph.subgraph(non_terminals)
  cycles = []
  for component in nx.strongly_connected_components(subgraph):
    if len(component) == 1 and not any(subgraph.has_edge(node, node) for node in component):
      continue
    cycles.append([node for node in non_terminals if node in component])
  cycles.sort(key=lambda cycle: non_terminals.index(cycle[0]))
  return cycles


def remove_chain_rules(grammar: Grammar, context: Optional[NormalizationContext] = None) -> Grammar:
  """
  Replaces all chain productions A ::= B by the non-chain alternatives of all non-terminals reachable from A.
  """
  chain_graph = make_chain_graph(grammar)
  closures = make_chain_closures(grammar, chain_graph=chain_graph)
  rules: Dict[str, List[Right]] = {}
  for left in grammar.non_terminals:
    rights: List[Right] = []
    for reachable in closures[left]:
      for prod in grammar.get_prods_for(reachable):
        if prod.is_chain(grammar.non_terminals) or prod.right in rights:
          continue
        rights.append(prod.right)
    if len(rights) == 0:
      raise DeadNonterminalError(
        left, 'all non-terminals reachable via chain productions (%s) only have chain productions' % (
          ', '.join(closures[left])),
        cycles=_get_chain_cycles(chain_graph, closures[left]))
    if len(closures[left]) > 1:
      log.debug('Inlined chain productions of %s from %s', left, ', '.join(closures[left][1:]))
    rules[left] = rights
  return make_grammar(rules, start=grammar.start)
