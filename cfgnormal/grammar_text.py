"""
Textual grammar notation::

  # comment
  E   ::= O ROE
  ROE ::= RO O ROE | ε
  M   ::= ID | NUM
        | LP E RP

`->` may be used instead of `::=`, `eps` instead of `ε`.
A line starting with `|`, or following a line ending with `|`, continues the previous rule.
Symbols are separated by whitespace.
"""
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from cfgnormal.errors import GrammarSyntaxError
from cfgnormal.grammar import EPSILON, Grammar, Right, TerminalClassification

RULE_SEPARATORS = ('::=', '->')
ALTERNATIVE_SEPARATOR = '|'
EPSILON_SPELLINGS = (EPSILON, 'eps')

_SYMBOL_RE = re.compile(r'\S+')

Token = Tuple[str, int]  # text, position


def _tokenize_line(line, line_pos):
  """
  :param str line: without line break
  :param int line_pos: position of the line in the whole text
  :rtype: list[Token]
  """
  line = line.split('#', 1)[0]
  return [(match.group(), line_pos + match.start()) for match in _SYMBOL_RE.finditer(line)]


def _split_alternatives(text, tokens, end_pos):
  """
  :param str text: whole text, for errors
  :param list[Token] tokens: right side of a rule
  :param int end_pos: position after the last token, for errors
  :rtype: list[tuple[str]]
  """
  alternatives: List[Right] = []
  current: List[str] = []
  current_pos = tokens[0][1] if len(tokens) > 0 else end_pos
  for symbol, pos in tokens + [(ALTERNATIVE_SEPARATOR, end_pos)]:
    if symbol != ALTERNATIVE_SEPARATOR:
      if symbol in RULE_SEPARATORS:
        raise GrammarSyntaxError(text, pos, 'Unexpected %r inside alternatives' % symbol)
      current.append(EPSILON if symbol in EPSILON_SPELLINGS else symbol)
      continue
    if len(current) == 0:
      raise GrammarSyntaxError(
        text, current_pos, 'Empty alternative, write %s for the empty alternative' % EPSILON)
    alternatives.append(tuple(current))
    current = []
    current_pos = pos + len(symbol)
  return alternatives


def parse_grammar_rules(text):
  """
  :param str text:
  :return: non-terminal -> alternatives, in order of definition
  :rtype: dict[str, list[tuple[str]]]
  """
  rules: Dict[str, List[Right]] = {}
  current_left: Optional[str] = None
  continues = False
  line_pos = 0
  for line in text.splitlines(keepends=True):
    content = line.rstrip('\r\n')
    tokens = _tokenize_line(content, line_pos)
    end_pos = line_pos + len(content)
    line_pos += len(line)
    if len(tokens) == 0:
      continue

    if len(tokens) >= 2 and tokens[1][0] in RULE_SEPARATORS:
      left, left_pos = tokens[0]
      if continues:
        raise GrammarSyntaxError(text, left_pos, 'Expected an alternative after %r' % ALTERNATIVE_SEPARATOR)
      if left in EPSILON_SPELLINGS or left == ALTERNATIVE_SEPARATOR or left in RULE_SEPARATORS:
        raise GrammarSyntaxError(text, left_pos, 'Expected a non-terminal, got %r' % left)
      current_left = left
      right_tokens = tokens[2:]
    elif tokens[0][0] == ALTERNATIVE_SEPARATOR or continues:
      if current_left is None:
        raise GrammarSyntaxError(text, tokens[0][1], 'Alternatives without a rule')
      right_tokens = tokens[1:] if tokens[0][0] == ALTERNATIVE_SEPARATOR else tokens
    else:
      symbol, pos = tokens[0]
      raise GrammarSyntaxError(
        text, pos, 'Expected a rule like `%s ::= ...`' % symbol, to_pos=tokens[-1][1] + len(tokens[-1][0]))

    continues = len(right_tokens) > 0 and right_tokens[-1][0] == ALTERNATIVE_SEPARATOR
    if continues:
      right_tokens = right_tokens[:-1]
    rules.setdefault(current_left, []).extend(_split_alternatives(text, right_tokens, end_pos))

  if continues:
    raise GrammarSyntaxError(text, len(text), 'Expected an alternative after %r' % ALTERNATIVE_SEPARATOR)
  if len(rules) == 0:
    raise GrammarSyntaxError(text, len(text), 'No rules found')
  return rules


def parse_grammar_text(text: str, start: Optional[str] = None,
                       is_terminal: Optional[TerminalClassification] = None) -> Grammar:
  """
  :param text: grammar in the notation described above
  :param start: start non-terminal, by default the one defined first
  :param is_terminal: see :class:`Grammar`
  """
  return Grammar.from_dict(parse_grammar_rules(text), start=start, is_terminal=is_terminal)


def load_grammar(path: Union[str, Path], start: Optional[str] = None,
                 is_terminal: Optional[TerminalClassification] = None) -> Grammar:
  with open(path, encoding='utf-8') as grammar_file:
    text = grammar_file.read()
  return parse_grammar_text(text, start=start, is_terminal=is_terminal)


def format_grammar(grammar: Grammar) -> str:
  """
  One line `A ::= x y | z` per non-terminal, the start symbol first.
  """
  lefts = [grammar.start] + [left for left in grammar.non_terminals if left != grammar.start]
  return '\n'.join(
    '%s ::= %s' % (left, (' %s ' % ALTERNATIVE_SEPARATOR).join(
      ' '.join(right) for right in grammar.get_rights_for(left)))
    for left in lefts)
