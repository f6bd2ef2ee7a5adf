"""
The empty marker is a distinguished symbol: a non-terminal derives the empty word via the alternative `(EPSILON,)`.
It never appears inside a longer production.
"""
from typing import Tuple, Dict, Callable, Union, Collection, List

from cfgnormal.errors import MalformedGrammarError

EPSILON = 'ε'

Right = Tuple[str, ...]
TerminalClassification = Union[Callable[[str], bool], Collection[str]]


class Production:
  """
  A production A -> X_1 X_2 ... X_n, or A -> ε.
  """

  def __init__(self, left, *right):
    """
    :param str left: A
    :param str right: X_1 ... X_n
    """
    self.left = left
    if len(right) == 1 and isinstance(right[0], (list, tuple)):
      right = tuple(right[0])
    self.right: Right = tuple(right)

  def __repr__(self):
    return 'Production[%r -> %s]' % (self.left, ' '.join([repr(symbol) for symbol in self.right]))

  def __hash__(self):
    return hash((self.left, self.right))

  def __eq__(self, other):
    if not isinstance(other, Production):
      return False
    return self.left == other.left and self.right == other.right

  def is_epsilon(self):
    """
    :rtype: bool
    """
    return self.right == (EPSILON,)

  def is_chain(self, non_terminals):
    """
    :param Collection[str] non_terminals:
    :return: whether this is a unit production A -> B with B a non-terminal
    :rtype: bool
    """
    return len(self.right) == 1 and self.right[0] != EPSILON and self.right[0] in non_terminals


def _make_is_terminal(is_terminal):
  """
  :param TerminalClassification|None is_terminal:
  :rtype: Callable[[str], bool]|None
  """
  if is_terminal is None or callable(is_terminal):
    return is_terminal
  terminal_table = frozenset(is_terminal)
  return lambda symbol: symbol in terminal_table


class Grammar:
  """
  A context free grammar, i.e. a mapping non-terminal -> alternatives.

  Non-terminals are kept in order of their first definition and productions in their given order,
  so that all transformations give reproducible output.
  Duplicate productions are dropped.
  """

  def __init__(self, *prods, start=None, is_terminal=None):
    """
    :param Production prods:
    :param None|str start: start non-terminal, by default left of first production
    :param TerminalClassification|None is_terminal: tells which symbols are terminals.
      By default, exactly the symbols without productions are terminals.
    """
    if len(prods) == 1 and isinstance(prods[0], (list, tuple)):
      prods = tuple(prods[0])
    if len(prods) == 0:
      raise MalformedGrammarError('grammar has no productions')
    assert all(isinstance(prod, Production) for prod in prods)
    self._prods_by_left: Dict[str, List[Production]] = {}
    for prod in prods:
      left_prods = self._prods_by_left.setdefault(prod.left, [])
      if prod not in left_prods:
        left_prods.append(prod)
    self.prods: Tuple[Production, ...] = tuple(
      prod for left_prods in self._prods_by_left.values() for prod in left_prods)
    if start is None:
      start = self.prods[0].left
    self.start = start

    self.non_terminals: Tuple[str, ...] = tuple(self._prods_by_left.keys())
    self._validate(_make_is_terminal(is_terminal))
    self.terminals: Tuple[str, ...] = tuple(sorted(
      set(x for p in self.prods for x in p.right if x != EPSILON and x not in self._prods_by_left)))
    self.symbols = self.non_terminals + self.terminals

  @classmethod
  def from_dict(cls, rules, start=None, is_terminal=None):
    """
    :param dict[str, Iterable[Sequence[str]]] rules: non-terminal -> list of alternatives
    :param None|str start: start non-terminal, by default the first key
    :param TerminalClassification|None is_terminal:
    :rtype: Grammar
    """
    prods = []
    for left, rights in rules.items():
      rights = list(rights)
      if len(rights) == 0:
        raise MalformedGrammarError('non-terminal has no alternatives', left=left)
      for right in rights:
        if isinstance(right, str):
          right = (right,)
        prods.append(Production(left, tuple(right)))
    return cls(*prods, start=start, is_terminal=is_terminal)

  def _validate(self, is_terminal):
    """
    :param Callable[[str], bool]|None is_terminal:
    """
    if self.start not in self._prods_by_left:
      raise MalformedGrammarError('start symbol %r has no productions' % self.start)
    for left in self.non_terminals:
      if left == EPSILON:
        raise MalformedGrammarError('the empty marker cannot be defined', left=left)
      if is_terminal is not None and is_terminal(left):
        raise MalformedGrammarError('terminal %r is used as the left side of a production' % left, left=left)
    for prod in self.prods:
      if len(prod.right) == 0:
        raise MalformedGrammarError(
          'empty production, use %r for the empty alternative' % EPSILON, left=prod.left, right=prod.right)
      if EPSILON in prod.right and not prod.is_epsilon():
        raise MalformedGrammarError(
          'the empty marker must be the only symbol of its alternative', left=prod.left, right=prod.right)
      if is_terminal is None:
        continue
      for symbol in prod.right:
        if symbol != EPSILON and not is_terminal(symbol) and symbol not in self._prods_by_left:
          raise MalformedGrammarError(
            'reference to undefined non-terminal %r' % symbol, left=prod.left, right=prod.right)

  def __repr__(self):
    return 'Grammar[start=%r: %s]' % (self.start, ', '.join(repr(prod) for prod in self.prods))

  def __eq__(self, other):
    if not isinstance(other, Grammar):
      return False
    return self.start == other.start and self.to_dict() == other.to_dict()

  def __hash__(self):
    return hash((self.start, frozenset(self.prods)))

  def is_non_terminal(self, symbol):
    """
    :param str symbol:
    :rtype: bool
    """
    return symbol in self._prods_by_left

  def get_prods_for(self, left):
    """
    :param str left: left-hand non-terminal of production
    :rtype: tuple[Production]
    """
    assert left in self._prods_by_left, 'unknown non-terminal %r' % left
    return tuple(self._prods_by_left[left])

  def get_rights_for(self, left):
    """
    :param str left: left-hand non-terminal of production
    :return: the alternatives of `left`
    :rtype: tuple[tuple[str]]
    """
    return tuple(prod.right for prod in self.get_prods_for(left))

  def to_dict(self):
    """
    :return: non-terminal -> alternatives, as fresh lists
    :rtype: dict[str, list[tuple[str]]]
    """
    return {left: [prod.right for prod in left_prods] for left, left_prods in self._prods_by_left.items()}

  def copy(self):
    """
    :rtype: Grammar
    """
    return Grammar(*self.prods, start=self.start)

  def copy_with_start(self, start):
    """
    :param str start: new start non-terminal symbol
    :rtype: Grammar
    """
    if start == self.start:
      return self
    assert start in self.non_terminals
    return Grammar(*self.prods, start=start)


def make_grammar(rules, start):
  """
  Builds the grammar produced by a transformation.
  Every non-terminal must be a key of `rules`, so no terminal classification is needed.

  :param dict[str, Iterable[tuple[str]]] rules: non-terminal -> alternatives, in output order
  :param str start:
  :rtype: Grammar
  """
  return Grammar(
    *[Production(left, right) for left, rights in rules.items() for right in rights], start=start,
    is_terminal=lambda symbol: symbol not in rules)
