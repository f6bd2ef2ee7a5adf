import _setup_test_env  # noqa
import sys
import unittest
import better_exchook
import pytest

from cfgnormal.config import EpsilonPolicy, NormalizationConfig
from cfgnormal.context import NormalizationContext
from cfgnormal.epsilon import make_nullable_set, make_non_empty_set, make_epsilon_free_variants, remove_epsilon_rules
from cfgnormal.errors import CombinatorialLimitExceeded
from cfgnormal.grammar import EPSILON, Grammar
from cfgnormal.language import make_language_up_to, make_words_up_to
from example_grammars import make_expression_grammar


def _make_context(g, **kwargs):
  return NormalizationContext(g, NormalizationConfig(**kwargs))


def test_make_nullable_set():
  assert make_nullable_set(make_expression_grammar()) == {'ROE', 'AO', 'MT'}


def test_make_nullable_set_transitive():
  g = Grammar.from_dict({
    'S': [['A', 'B']],
    'A': [[EPSILON], ['a']],
    'B': [['A', 'A'], ['b']],
    'C': [['c', 'A']],
  })
  assert make_nullable_set(g) == {'S', 'A', 'B'}


def test_make_nullable_set_idempotent():
  g = Grammar.from_dict({
    'S': [['A', 'B'], ['s']],
    'A': [[EPSILON], ['a']],
    'B': [['b'], [EPSILON]],
  })
  nullable = make_nullable_set(g)
  assert nullable == {'S', 'A', 'B'}
  assert make_nullable_set(g.copy()) == nullable
  g_keep = remove_epsilon_rules(g, _make_context(g, epsilon_policy=EpsilonPolicy.KEEP_NULLABLE))
  assert make_nullable_set(g_keep) == nullable


def test_make_non_empty_set():
  g = Grammar.from_dict({
    'S': [['a', 'N'], ['N']],
    'N': [[EPSILON]],
    'M': [['N', 'N'], [EPSILON]],
  })
  assert make_non_empty_set(g) == {'S'}


def test_make_epsilon_free_variants():
  assert make_epsilon_free_variants(('a', 'N', 'b', 'N'), {'N'}) == [
    ('a', 'b'), ('a', 'b', 'N'), ('a', 'N', 'b'), ('a', 'N', 'b', 'N')]
  assert make_epsilon_free_variants(('N', 'M'), {'N', 'M'}) == [('M',), ('N',), ('N', 'M')]
  assert make_epsilon_free_variants(('a', 'N', 'E'), {'N', 'E'}, epsilon_only={'E'}) == [('a',), ('a', 'N')]
  assert make_epsilon_free_variants(('a', 'b'), set()) == [('a', 'b')]


def test_remove_epsilon_rules_expression():
  g = make_expression_grammar()
  g_free = remove_epsilon_rules(g)
  assert g_free.to_dict() == {
    'E': [('O',), ('O', 'ROE')],
    'ROE': [('RO', 'O'), ('RO', 'O', 'ROE')],
    'O': [('T',), ('T', 'AO')],
    'AO': [('A', 'T'), ('A', 'T', 'AO')],
    'T': [('M',), ('M', 'MT')],
    'MT': [('MUL', 'M'), ('MUL', 'M', 'MT')],
    'M': [('ID',), ('NUM',), ('BOOL',), ('UN', 'M'), ('LP', 'E', 'RP')],
  }
  assert g_free.start == 'E'
  assert all(not prod.is_epsilon() for prod in g_free.prods)
  # input is unchanged
  assert g == make_expression_grammar()


def _make_nullable_start_grammar():
  return Grammar.from_dict({
    'S': [['A'], ['x', 'S']],
    'A': [['a'], [EPSILON]],
  })


def test_remove_epsilon_rules_keep_start():
  g = _make_nullable_start_grammar()
  g_free = remove_epsilon_rules(g, _make_context(g, epsilon_policy=EpsilonPolicy.KEEP_START))
  assert g_free.to_dict() == {
    'S': [('A',), ('x',), ('x', 'S'), (EPSILON,)],
    'A': [('a',)],
  }
  assert make_language_up_to(g_free, 3) == make_language_up_to(g, 3)
  assert () in make_language_up_to(g_free, 3)


def test_remove_epsilon_rules_drop_all():
  g = _make_nullable_start_grammar()
  g_free = remove_epsilon_rules(g, _make_context(g, epsilon_policy=EpsilonPolicy.DROP_ALL))
  assert g_free.to_dict() == {
    'S': [('A',), ('x',), ('x', 'S')],
    'A': [('a',)],
  }
  assert make_language_up_to(g_free, 3) == make_language_up_to(g, 3) - {()}


def test_remove_epsilon_rules_keep_nullable():
  g = _make_nullable_start_grammar()
  g_free = remove_epsilon_rules(g, _make_context(g, epsilon_policy=EpsilonPolicy.KEEP_NULLABLE))
  assert g_free.to_dict() == {
    'S': [('A',), ('x',), ('x', 'S'), (EPSILON,)],
    'A': [('a',), (EPSILON,)],
  }
  # every non-terminal keeps its language, not only the start symbol
  assert make_words_up_to(g_free, 3) == make_words_up_to(g, 3)


def test_remove_epsilon_rules_only_start_keeps_epsilon():
  g = Grammar.from_dict({
    'S': [['A', 'B', 'A'], [EPSILON]],
    'A': [['a', 'A'], [EPSILON]],
    'B': [['b'], ['A', 'B', 'A']],
  })
  g_free = remove_epsilon_rules(g)
  for prod in g_free.prods:
    if prod.is_epsilon():
      assert prod.left == g_free.start
  assert make_language_up_to(g_free, 4) == make_language_up_to(g, 4)


def test_remove_epsilon_rules_epsilon_only():
  g = Grammar.from_dict({
    'S': [['a', 'N', 'b']],
    'N': [[EPSILON]],
  })
  with unittest.TestCase().assertLogs('cfgnormal.epsilon', level='WARNING') as logs:
    g_free = remove_epsilon_rules(g)
  assert g_free.to_dict() == {
    'S': [('a', 'b')],
    'N': [(EPSILON,)],
  }
  assert any('N only derives the empty word' in line for line in logs.output)


def test_remove_epsilon_rules_combinatorial_limit():
  g = Grammar.from_dict({
    'S': [['A', 'x', 'B', 'C', 'D', 'E']],
    'A': [['a'], [EPSILON]],
    'B': [['b'], [EPSILON]],
    'C': [['c'], [EPSILON]],
    'D': [['d'], [EPSILON]],
    'E': [['e'], [EPSILON]],
  })
  with pytest.raises(CombinatorialLimitExceeded) as exc_info:
    remove_epsilon_rules(g, _make_context(g, max_nullable_occurrences=4))
  assert exc_info.value.left == 'S'
  assert exc_info.value.right == ('A', 'x', 'B', 'C', 'D', 'E')
  assert exc_info.value.num_nullable == 5

  with unittest.TestCase().assertLogs('cfgnormal.epsilon', level='WARNING') as logs:
    g_free = remove_epsilon_rules(g, _make_context(g, max_nullable_occurrences=None, warn_nullable_occurrences=2))
  assert len(g_free.get_rights_for('S')) == 2 ** 5
  assert any('5 nullable occurrences' in line for line in logs.output)

  g_free = remove_epsilon_rules(g, _make_context(g, max_nullable_occurrences=5))
  assert ('x',) in g_free.get_rights_for('S')
  assert ('A', 'x', 'B', 'C', 'D', 'E') in g_free.get_rights_for('S')


if __name__ == "__main__":
  better_exchook.install()
  if len(sys.argv) <= 1:
    for k, v in sorted(globals().items()):
      if k.startswith("test_"):
        print("-" * 40)
        print("Executing: %s" % k)
        try:
          v()
        except unittest.SkipTest as exc:
          print("SkipTest:", exc)
        print("-" * 40)
    print("Finished all tests.")
  else:
    assert len(sys.argv) >= 2
    for arg in sys.argv[1:]:
      print("Executing: %s" % arg)
      if arg in globals():
        globals()[arg]()  # assume function and execute
      else:
        eval(arg)  # assume Python code and execute
