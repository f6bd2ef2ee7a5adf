from typing import Dict, Set, Tuple

from cfgnormal.grammar import EPSILON, Grammar

Word = Tuple[str, ...]


def make_words_up_to(grammar, max_length):
  """
  All terminal words of length at most `max_length` for each non-terminal.
  The empty word is the empty tuple.

  :param Grammar grammar:
  :param int max_length:
  :rtype: dict[str, set[tuple[str]]]
  """
  assert max_length >= 0
  words: Dict[str, Set[Word]] = {left: set() for left in grammar.non_terminals}
  changes = True
  while changes:
    changes = False
    for left in grammar.non_terminals:
      left_words = set()
      for right in grammar.get_rights_for(left):
        left_words.update(get_words_for_right(grammar, words, right, max_length))
      if left_words != words[left]:
        words[left] = left_words
        changes = True
  return words


def get_words_for_right(grammar, words, right, max_length):
  """
  :param Grammar grammar:
  :param dict[str, set[tuple[str]]] words: (partial) words of the non-terminals
  :param tuple[str] right:
  :param int max_length:
  :rtype: set[tuple[str]]
  """
  prefixes: Set[Word] = {()}
  for symbol in right:
    if symbol == EPSILON:
      continue
    if grammar.is_non_terminal(symbol):
      prefixes = {
        prefix + word for prefix in prefixes for word in words[symbol] if len(prefix) + len(word) <= max_length}
    else:
      prefixes = {prefix + (symbol,) for prefix in prefixes if len(prefix) < max_length}
    if len(prefixes) == 0:
      break
  return prefixes


def make_language_up_to(grammar: Grammar, max_length: int) -> Set[Word]:
  """
  :returns: all words of length at most `max_length` derivable from the start symbol
  """
  return make_words_up_to(grammar, max_length)[grammar.start]
