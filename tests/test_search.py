import pytest

from recipebook.search import SqlRecipeCorpus, resolve_match_keys, resolve_matches


@pytest.fixture
def soups(add_recipe):
    return {
        "tomato": add_recipe("Tomato Soup", "4 tomatoes\n1 bunch fresh basil\nsalt"),
        "lentil": add_recipe("Lentil Soup", "lentils\ncarrot\ncumin"),
        "pesto": add_recipe("Basil Pesto", "pine nuts\nparmesan"),
        "odd": add_recipe("100% Rye", "rye_flour\nwater"),
    }


def test_ingredient_match_ignores_case(db, soups):
    corpus = SqlRecipeCorpus(db)
    for term in ("basil", "BASIL", "Basil"):
        assert soups["tomato"].id in resolve_matches(corpus, term)


def test_name_or_ingredients(db, soups):
    got = resolve_matches(SqlRecipeCorpus(db), "basil")
    assert got == {soups["tomato"].id, soups["pesto"].id}


def test_non_matching_term(db, soups):
    assert resolve_matches(SqlRecipeCorpus(db), "kale") == set()


@pytest.mark.parametrize("term", ["", "   ", None])
def test_empty_term_matches_everything(db, soups, term):
    assert resolve_matches(SqlRecipeCorpus(db), term) == {r.id for r in soups.values()}


def test_wildcards_are_literal(db, soups):
    corpus = SqlRecipeCorpus(db)
    assert resolve_matches(corpus, "%") == {soups["odd"].id}
    assert resolve_matches(corpus, "_") == {soups["odd"].id}


def test_marked_only_corpus(db, add_recipe):
    kept = add_recipe("Marked Stew", "beef", marked=True)
    add_recipe("Plain Stew", "beef")
    corpus = SqlRecipeCorpus(db, marked_only=True)
    assert resolve_matches(corpus, "") == {kept.id}
    assert resolve_matches(corpus, "stew") == {kept.id}


def test_non_ascii_text_matches_ignoring_case(db, add_recipe):
    eclair = add_recipe("Éclair au chocolat", "crème pâtissière\nchocolat noir")
    add_recipe("Plain Scone", "flour\nbutter")
    corpus = SqlRecipeCorpus(db)
    for term in ("éclair", "ÉCLAIR", "CRÈME", "Pâtissière"):
        assert resolve_matches(corpus, term) == {eclair.id}


def test_match_keys_carry_the_sort_value(db, soups):
    corpus = SqlRecipeCorpus(db)
    assert sorted(resolve_match_keys(corpus, "soup", "name")) == sorted(
        [(soups["tomato"].id, "Tomato Soup"), (soups["lentil"].id, "Lentil Soup")]
    )
    dated = resolve_match_keys(corpus, "", "date_added")
    assert {rid for rid, _ in dated} == {r.id for r in soups.values()}
    assert all(value is not None for _, value in dated)


def test_matching_and_sort_values_come_from_one_query(db, soups, statements):
    statements.clear()
    resolve_match_keys(SqlRecipeCorpus(db), "basil", "date_added")
    assert len(statements) == 1


class FakeCorpus:
    def __init__(self):
        self.calls = []

    def all_keys(self, field):
        self.calls.append(("all", field))
        return [(1, "a"), (2, "b"), (3, "c")]

    def keys_matching(self, term, field):
        self.calls.append((term, field))
        return [(2, "b")]


def test_resolver_only_needs_the_corpus_interface():
    corpus = FakeCorpus()
    assert resolve_matches(corpus, "  ") == {1, 2, 3}
    assert resolve_match_keys(corpus, " soup ", "date_added") == [(2, "b")]
    assert corpus.calls == [("all", "name"), ("soup", "date_added")]
