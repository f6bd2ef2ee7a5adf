import logging
from typing import Dict, List, Optional

from cfgnormal.context import NormalizationContext
from cfgnormal.grammar import EPSILON, Grammar, Right, make_grammar

log = logging.getLogger(__name__)


def group_by_leading_symbol(rights):
  """
  :param Sequence[tuple[str]] rights:
  :return: leading symbol -> alternatives starting with it, in order of first occurrence
  :rtype: dict[str, list[tuple[str]]]
  """
  groups: Dict[str, List[Right]] = {}
  for right in rights:
    groups.setdefault(right[0], []).append(right)
  return groups


def get_common_prefix_groups(grammar: Grammar) -> Dict[str, Dict[str, List[Right]]]:
  """
  :returns: for each non-terminal that is not left-factored,
    the leading symbols shared by several alternatives, together with these alternatives
  """
  shared_groups = {}
  for left in grammar.non_terminals:
    groups = {
      symbol: group for symbol, group in group_by_leading_symbol(grammar.get_rights_for(left)).items()
      if len(group) > 1 and symbol != EPSILON}
    if len(groups) > 0:
      shared_groups[left] = groups
  return shared_groups


def left_factor(grammar: Grammar, context: Optional[NormalizationContext] = None) -> Grammar:
  """
  Single left factoring pass: A ::= a x | a y | b  ~>  A ::= a A_fact_a | b,  A_fact_a ::= x | y.

  The new non-terminals are not factored again,
  so alternatives sharing a longer prefix still need further passes.
  """
  if context is None:
    context = NormalizationContext(grammar)
  context.register(grammar)
  rules: Dict[str, List[Right]] = {}
  for left in grammar.non_terminals:
    rights: List[Right] = []
    factored_rules: Dict[str, List[Right]] = {}
    for symbol, group in group_by_leading_symbol(grammar.get_rights_for(left)).items():
      if len(group) == 1 or symbol == EPSILON:
        rights.extend(group)
        continue
      factor = context.make_factor_name(left, symbol)
      log.debug('Factoring %i alternatives of %s starting with %s into %s', len(group), left, symbol, factor)
      rights.append((symbol, factor))
      factored_rules[factor] = [right[1:] if len(right) > 1 else (EPSILON,) for right in group]
    rules[left] = rights
    rules.update(factored_rules)
  return make_grammar(rules, start=grammar.start)
