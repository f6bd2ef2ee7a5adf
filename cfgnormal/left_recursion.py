"""
Elimination of direct left recursion A ::= A alpha | beta  ~>  A ::= beta A',  A' ::= alpha A' | ε.

Indirect left recursion (A ::= B x, B ::= A y) is neither detected nor removed.
"""
import logging
from typing import Dict, List, Optional

from cfgnormal.context import NormalizationContext
from cfgnormal.errors import DeadNonterminalError
from cfgnormal.grammar import EPSILON, Grammar, Right, make_grammar

log = logging.getLogger(__name__)


def get_directly_left_recursive(grammar: Grammar) -> List[str]:
  """
  :returns: all non-terminals A with an alternative A ::= A ...
  """
  return [
    left for left in grammar.non_terminals if any(right[0] == left for right in grammar.get_rights_for(left))]


def remove_left_recursion(grammar: Grammar, context: Optional[NormalizationContext] = None) -> Grammar:
  if context is None:
    context = NormalizationContext(grammar)
  context.register(grammar)
  rules: Dict[str, List[Right]] = {}
  for left in grammar.non_terminals:
    recursive_rests: List[Right] = []
    bases: List[Right] = []
    for right in grammar.get_rights_for(left):
      if right[0] == left:
        if len(right) > 1:  # A ::= A derives nothing new
          recursive_rests.append(right[1:])
      else:
        bases.append(right)
    if len(bases) == 0:
      raise DeadNonterminalError(left, 'all alternatives are left-recursive, no finite word can be derived')
    if len(recursive_rests) == 0:
      rules[left] = bases
      continue

    tail = context.make_fresh_non_terminal("%s'" % left)
    log.debug('Removing direct left recursion of %s using %s', left, tail)
    rules[left] = [(tail,) if base == (EPSILON,) else base + (tail,) for base in bases]
    rules[tail] = [rest + (tail,) for rest in recursive_rests] + [(EPSILON,)]
  return make_grammar(rules, start=grammar.start)
