import logging
from typing import Dict, List, Optional, Set

from cfgnormal.config import EpsilonPolicy
from cfgnormal.context import NormalizationContext
from cfgnormal.errors import CombinatorialLimitExceeded
from cfgnormal.grammar import EPSILON, Grammar, Right, make_grammar

log = logging.getLogger(__name__)


def make_nullable_set(grammar):
  """
  :param Grammar grammar:
  :return: all non-terminals that derive the empty word
  :rtype: set[str]
  """
  nullable: Set[str] = set()
  changes = True
  while changes:
    changes = False
    for left in grammar.non_terminals:
      if left in nullable:
        continue
      # A -> ε, or A -> X1 ... Xn with all Xi nullable
      if any(prod.is_epsilon() or all(symbol in nullable for symbol in prod.right)
             for prod in grammar.get_prods_for(left)):
        nullable.add(left)
        changes = True
  return nullable


def make_non_empty_set(grammar):
  """
  Over-approximates the non-terminals that derive some non-empty word,
  i.e. it does not check that the other symbols of the production are productive.

  :param Grammar grammar:
  :rtype: set[str]
  """
  non_empty: Set[str] = set()
  changes = True
  while changes:
    changes = False
    for left in grammar.non_terminals:
      if left in non_empty:
        continue
      if any(not prod.is_epsilon() and any(
              not grammar.is_non_terminal(symbol) or symbol in non_empty for symbol in prod.right)
             for prod in grammar.get_prods_for(left)):
        non_empty.add(left)
        changes = True
  return non_empty


def make_epsilon_free_variants(right, nullable, epsilon_only=frozenset()):
  """
  Each occurrence of a nullable symbol may either be kept or dropped.
  Occurrences of `epsilon_only` symbols are always dropped.

  :param tuple[str] right: not the empty alternative
  :param set[str] nullable:
  :param set[str]|frozenset[str] epsilon_only: nullable symbols that only derive the empty word
  :return: all 2^k variants (k nullable occurrences), without the empty one, dropping before keeping
  :rtype: list[tuple[str]]
  """
  assert right != (EPSILON,)
  variants: List[Right] = [()]
  for symbol in right:
    if symbol in epsilon_only:
      continue
    if symbol in nullable:
      variants = [new_variant for variant in variants for new_variant in (variant, variant + (symbol,))]
    else:
      variants = [variant + (symbol,) for variant in variants]
  return [variant for variant in variants if len(variant) > 0]


def _check_combinatorial_limit(left, right, num_nullable, context):
  """
  :param str left:
  :param tuple[str] right:
  :param int num_nullable:
  :param NormalizationContext context:
  """
  config = context.config
  if config.max_nullable_occurrences is not None and num_nullable > config.max_nullable_occurrences:
    raise CombinatorialLimitExceeded(left, right, num_nullable=num_nullable, limit=config.max_nullable_occurrences)
  if config.warn_nullable_occurrences is not None and num_nullable > config.warn_nullable_occurrences:
    log.warning(
      'Production %s ::= %s has %i nullable occurrences, expanding it into up to %i alternatives',
      left, ' '.join(right), num_nullable, 2 ** num_nullable)


def _keeps_empty_alternative(left, nullable, context):
  """
  :param str left:
  :param set[str] nullable:
  :param NormalizationContext context:
  :rtype: bool
  """
  if left not in nullable:
    return False
  policy = context.config.epsilon_policy
  if policy == EpsilonPolicy.KEEP_NULLABLE:
    return True
  if policy == EpsilonPolicy.KEEP_START:
    return left == context.start
  assert policy == EpsilonPolicy.DROP_ALL
  return False


def remove_epsilon_rules(grammar: Grammar, context: Optional[NormalizationContext] = None) -> Grammar:
  """
  Removes all empty alternatives, except those the configured :class:`EpsilonPolicy` keeps.
  A non-terminal which is left without alternatives gets the single alternative ε.
  """
  if context is None:
    context = NormalizationContext(grammar)
  nullable = make_nullable_set(grammar)
  epsilon_only = nullable - make_non_empty_set(grammar)
  log.debug('Nullable non-terminals: %s, of which only derive the empty word: %s',
            sorted(nullable), sorted(epsilon_only))

  rules: Dict[str, List[Right]] = {}
  for left in grammar.non_terminals:
    rights: List[Right] = []
    for prod in grammar.get_prods_for(left):
      if prod.is_epsilon():
        continue
      num_nullable = sum(1 for symbol in prod.right if symbol in nullable and symbol not in epsilon_only)
      _check_combinatorial_limit(left, prod.right, num_nullable, context)
      for variant in make_epsilon_free_variants(prod.right, nullable, epsilon_only):
        if variant not in rights:
          rights.append(variant)
    if _keeps_empty_alternative(left, nullable, context):
      rights.append((EPSILON,))
    if len(rights) == 0:
      log.warning('Non-terminal %s only derives the empty word, keeping it as %s ::= %s', left, left, EPSILON)
      rights.append((EPSILON,))
    rules[left] = rights
  return make_grammar(rules, start=grammar.start)
