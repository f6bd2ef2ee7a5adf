import re
from typing import Optional, Set

from cfgnormal.config import NormalizationConfig
from cfgnormal.grammar import Grammar, EPSILON


class NormalizationContext:
  """
  State of a single normalization run: the options and the registry of non-terminal names in use.
  Create one per run, never share it between runs.
  """

  def __init__(self, grammar: Grammar, config: Optional[NormalizationConfig] = None):
    if config is None:
      config = NormalizationConfig()
    self.config = config
    self.start = grammar.start
    self.used_names: Set[str] = {EPSILON}
    self.register(grammar)

  def register(self, grammar: Grammar):
    """
    Marks all symbols of `grammar` as in use, terminals included.
    """
    self.used_names.update(grammar.symbols)

  def make_fresh_non_terminal(self, preferred: str) -> str:
    """
    :param preferred: name to use if it is still free
    :returns: `preferred`, or `preferred` with the smallest number suffix >= 2 that is still free
    """
    assert len(preferred) > 0
    name = preferred
    suffix = 2
    while name in self.used_names:
      name = '%s%i' % (preferred, suffix)
      suffix += 1
    self.used_names.add(name)
    return name

  def make_factor_name(self, left: str, symbol: str) -> str:
    """
    Fresh non-terminal for the continuation of the alternatives of `left` starting with `symbol`.
    """
    name = '%s_fact_%s' % (_sanitize_identifier(left), re.sub(r'\W', '', symbol, flags=re.ASCII))
    return self.make_fresh_non_terminal(name)


def _sanitize_identifier(name: str) -> str:
  name = re.sub(r'\W', '', name, flags=re.ASCII)
  if name == '' or name[0].isdigit():
    name = '_' + name
  return name
