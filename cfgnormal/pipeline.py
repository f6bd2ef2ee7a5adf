import logging
from typing import List, Optional, Tuple

from cfgnormal.chain_rules import remove_chain_rules
from cfgnormal.config import NormalizationConfig
from cfgnormal.context import NormalizationContext
from cfgnormal.epsilon import remove_epsilon_rules
from cfgnormal.grammar import Grammar
from cfgnormal.left_factoring import left_factor
from cfgnormal.left_recursion import remove_left_recursion

log = logging.getLogger(__name__)

# The order matters: each stage relies on the guarantees of the previous ones.
NORMALIZATION_STAGES = (
  ('epsilon elimination', remove_epsilon_rules),
  ('chain rule elimination', remove_chain_rules),
  ('left recursion elimination', remove_left_recursion),
  ('left factoring', left_factor),
)


def make_normalization_stages(grammar: Grammar,
                              config: Optional[NormalizationConfig] = None) -> List[Tuple[str, Grammar]]:
  """
  Runs all normalization stages.

  :returns: name and resulting grammar of every stage, in order
  """
  context = NormalizationContext(grammar, config=config)
  stages = []
  for stage_name, transform in NORMALIZATION_STAGES:
    grammar = transform(grammar, context)
    log.debug('After %s: %i non-terminals, %i productions', stage_name, len(grammar.non_terminals), len(grammar.prods))
    stages.append((stage_name, grammar))
  return stages


def normalize_grammar(grammar: Grammar, config: Optional[NormalizationConfig] = None) -> Grammar:
  """
  Removes empty alternatives, chain productions and direct left recursion, then left-factors once.
  """
  _, normalized = make_normalization_stages(grammar, config=config)[-1]
  return normalized
