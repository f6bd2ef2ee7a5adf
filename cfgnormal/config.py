from enum import Enum
from typing import Optional


class EpsilonPolicy(Enum):
  """
  Which non-terminals keep an explicit empty alternative after epsilon elimination.
  """
  KEEP_START = 'keep-start'  # only the start symbol, if it is nullable
  DROP_ALL = 'drop-all'  # none, the empty word is lost for the start symbol
  KEEP_NULLABLE = 'keep-nullable'  # every nullable non-terminal


class NormalizationConfig:
  """
  Options of one normalization run.
  """

  def __init__(self, epsilon_policy: EpsilonPolicy = EpsilonPolicy.KEEP_START,
               warn_nullable_occurrences: Optional[int] = 8, max_nullable_occurrences: Optional[int] = 16):
    """
    :param epsilon_policy: see :class:`EpsilonPolicy`
    :param warn_nullable_occurrences: log a warning when a production has more nullable occurrences,
      `None` to never warn
    :param max_nullable_occurrences: raise `CombinatorialLimitExceeded` when a production has more nullable
      occurrences, `None` for no limit
    """
    assert isinstance(epsilon_policy, EpsilonPolicy)
    assert warn_nullable_occurrences is None or warn_nullable_occurrences >= 0
    assert max_nullable_occurrences is None or max_nullable_occurrences >= 0
    self.epsilon_policy = epsilon_policy
    self.warn_nullable_occurrences = warn_nullable_occurrences
    self.max_nullable_occurrences = max_nullable_occurrences

  def __repr__(self):
    return 'NormalizationConfig(epsilon_policy=%s, warn_nullable_occurrences=%r, max_nullable_occurrences=%r)' % (
      self.epsilon_policy, self.warn_nullable_occurrences, self.max_nullable_occurrences)
