#!/usr/bin/env python3

"""
Main entry point: normalize a context free grammar given in `A ::= x y | z` notation.
"""
import argparse
import logging
import sys

import better_exchook

import _setup_cfgnormal_env  # noqa
from cfgnormal.config import EpsilonPolicy, NormalizationConfig
from cfgnormal.errors import GrammarError
from cfgnormal.grammar_text import load_grammar, format_grammar
from cfgnormal.pipeline import make_normalization_stages


def _make_optional_limit(value: str):
  """
  :param value: a number, or `none`
  :rtype: int|None
  """
  if value.lower() == 'none':
    return None
  limit = int(value)
  if limit < 0:
    raise argparse.ArgumentTypeError('must not be negative: %r' % value)
  return limit


def main():
  """
  Main entry point.
  """
  better_exchook.install()
  parser = argparse.ArgumentParser(description='Normalize a context free grammar.')
  parser.add_argument('grammar', help='Path to the grammar description')
  parser.add_argument('--start', default=None, help='Start non-terminal, by default the one defined first.')
  parser.add_argument(
    '--terminals', nargs='*', default=None,
    help='Terminal symbols. If given, every other symbol must be defined as a non-terminal.')
  parser.add_argument(
    '--epsilon-policy', dest='epsilon_policy', default=EpsilonPolicy.KEEP_START.value,
    choices=[policy.value for policy in EpsilonPolicy], help='Which non-terminals keep an empty alternative.')
  parser.add_argument(
    '--max-nullable', dest='max_nullable', type=_make_optional_limit, default=16,
    help='Maximum number of nullable occurrences within a production, or `none`.')
  parser.add_argument(
    '--warn-nullable', dest='warn_nullable', type=_make_optional_limit, default=8,
    help='Warn about productions with more nullable occurrences, or `none`.')
  parser.add_argument('--trace', action='store_true', help='Print the grammar after every stage.')
  parser.add_argument(
    '--verbose', dest='verbose', action='store_true', help='Print debug output and full stacktraces for errors.')

  args = parser.parse_args()
  logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format='%(levelname)s: %(message)s')

  config = NormalizationConfig(
    epsilon_policy=EpsilonPolicy(args.epsilon_policy),
    warn_nullable_occurrences=args.warn_nullable, max_nullable_occurrences=args.max_nullable)
  try:
    grammar = load_grammar(args.grammar, start=args.start, is_terminal=args.terminals)
    stages = make_normalization_stages(grammar, config=config)
  except GrammarError as error:
    if args.verbose:
      raise error
    else:
      print(str(error))
      sys.exit(1)

  if args.trace:
    print('---- input grammar:')
    print(format_grammar(grammar))
    for stage_name, stage_grammar in stages:
      print('---- after %s:' % stage_name)
      print(format_grammar(stage_grammar))
    return

  _, normalized = stages[-1]
  print(format_grammar(normalized))


if __name__ == '__main__':
  main()
