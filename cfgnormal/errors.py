from typing import Optional, Sequence, Tuple


class GrammarError(Exception):
  def __init__(self, message: str):
    super(GrammarError, self).__init__(message)


def get_line_col_from_pos(text, error_pos, num_before_context_lines=1, num_after_context_lines=1):
  """
  :param str text:
  :param int error_pos:
  :param int num_before_context_lines:
  :param int num_after_context_lines:
  :return: line + column, both starting counting at 1, as well as dict with context lines
  :rtype: tuple[int,int,dict[int,str]]
  """
  assert 0 <= error_pos <= len(text)
  if len(text) == 0:
    return 0, 1, {0: ''}
  char_pos = 0
  text_lines = text.splitlines()
  assert len(text_lines) > 0
  for line_num, line in enumerate(text_lines):
    assert char_pos <= error_pos
    if error_pos <= char_pos + len(line):
      col_num = error_pos - char_pos
      context_lines = {
        context_line_num + 1: text_lines[context_line_num]
        for context_line_num in range(
          max(0, line_num - num_before_context_lines), min(len(text_lines), line_num + num_after_context_lines + 1))}
      return line_num + 1, col_num + 1, context_lines
    char_pos += len(line) + 1  # consider end-of-line symbol
  context_lines = {
    context_line_num + 1: text_lines[context_line_num]
    for context_line_num in range(max(0, len(text_lines) - num_before_context_lines), len(text_lines))}
  return len(text_lines), len(text_lines[-1]) + 1, context_lines


def make_error_message(text: str, from_pos: int, error_name: str, message: str, to_pos: Optional[int] = None) -> str:
  line_num_pad_size = 3
  line, from_col, context_lines = get_line_col_from_pos(
    text, from_pos, num_before_context_lines=2, num_after_context_lines=1)
  assert line in context_lines
  if to_pos is not None:
    assert from_pos <= to_pos
    to_line, to_col, _ = get_line_col_from_pos(text, to_pos, num_before_context_lines=0, num_after_context_lines=0)
    if line != to_line:  # multi-line errors will only show the first line.
      to_col = len(context_lines[line])
  else:
    to_col = from_col
  return '%s on line %s:%s\n\n' % (error_name, line, from_col) + '\n'.join([
    ('%0' + str(line_num_pad_size) + 'i: %s%s') % (
      context_line_num, context_line,
      ('\n' + (' ' * (from_col - 1 + line_num_pad_size + 2)) + '^' * max(1, to_col - from_col))
      if context_line_num == line else '')
    for context_line_num, context_line in context_lines.items()]
  ) + '\n\n' + message


def format_right(right: Sequence[str]) -> str:
  """
  :param right: right side of a production
  """
  return ' '.join(right) if len(right) > 0 else '<empty>'


class GrammarSyntaxError(GrammarError):
  """
  The textual grammar notation could not be read.
  """

  def __init__(self, text, pos, message, to_pos=None):
    """
    :param str text: whole grammar description
    :param int pos: text position where the error occurred
    :param str message:
    :param int|None to_pos: up to which position
    """
    self.pos = pos
    super().__init__(make_error_message(text, pos, error_name='Grammar syntax error', message=message, to_pos=to_pos))


class MalformedGrammarError(GrammarError):
  """
  The grammar violates a structural rule, e.g. it references an undefined non-terminal.
  """

  def __init__(self, message: str, left: Optional[str] = None, right: Optional[Tuple[str, ...]] = None):
    self.left = left
    self.right = right
    if left is not None and right is not None:
      message = '%s (in production %s ::= %s)' % (message, left, format_right(right))
    elif left is not None:
      message = '%s (non-terminal %s)' % (message, left)
    super().__init__('Malformed grammar: %s' % message)


class DeadNonterminalError(GrammarError):
  """
  A non-terminal is left without any usable alternative, e.g. because it only chains to itself.
  """

  def __init__(self, left: str, message: str, cycles: Sequence[Sequence[str]] = ()):
    self.left = left
    self.cycles = [tuple(cycle) for cycle in cycles]
    if len(self.cycles) > 0:
      message += '; chain cycle(s): %s' % ', '.join(
        '{%s}' % ', '.join(cycle) for cycle in self.cycles)
    super().__init__('Dead non-terminal %s: %s' % (left, message))


class CombinatorialLimitExceeded(GrammarError):
  """
  Epsilon elimination would expand a production into too many alternatives.
  """

  def __init__(self, left: str, right: Tuple[str, ...], num_nullable: int, limit: int):
    self.left = left
    self.right = right
    self.num_nullable = num_nullable
    self.limit = limit
    super().__init__(
      'Combinatorial limit exceeded: production %s ::= %s has %i nullable occurrences '
      '(2^%i alternatives), but at most %i are allowed' % (
        left, format_right(right), num_nullable, num_nullable, limit))
