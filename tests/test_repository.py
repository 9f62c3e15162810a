import uuid

import pytest
from sqlalchemy.exc import ArgumentError, IntegrityError, OperationalError

from plantation.models import Estate, EstateStats, Tree
from plantation.repository import PostgresRepository, Repository


@pytest.fixture
def repo():
    repository = PostgresRepository("sqlite://")
    repository._create_tables()
    yield repository
    repository.close()


def new_id():
    return str(uuid.uuid4())


def test_repository_is_abstract():
    with pytest.raises(TypeError):
        Repository()


def test_unknown_backend_is_rejected():
    with pytest.raises(ArgumentError):
        PostgresRepository("notadialect://host/db")


def test_unreachable_database_raises():
    with pytest.raises(OperationalError):
        PostgresRepository("sqlite:////nonexistent-directory/deeper/plantation.db")


def test_create_and_get_estate(repo):
    estate_id = new_id()
    assert repo.create_estate(estate_id, 10, 20) == estate_id
    assert repo.get_estate(estate_id) == Estate(length=10, width=20)


def test_same_dimensions_return_existing_estate(repo):
    first = new_id()
    second = new_id()
    assert repo.create_estate(first, 5, 1) == first
    assert repo.create_estate(second, 5, 1) == first
    assert repo.get_estate(second) is None


def test_missing_estate_is_none(repo):
    assert repo.get_estate(new_id()) is None


def test_tree_exists_after_creation(repo):
    estate_id = repo.create_estate(new_id(), 10, 20)
    assert repo.tree_exists(estate_id, 5, 5) is False
    tree_id = new_id()
    assert repo.create_tree(tree_id, estate_id, 5, 5, 10) == tree_id
    assert repo.tree_exists(estate_id, 5, 5) is True
    assert repo.tree_exists(estate_id, 6, 5) is False
    assert repo.tree_exists(new_id(), 5, 5) is False


def test_duplicate_tree_id_is_rejected(repo):
    estate_id = repo.create_estate(new_id(), 10, 20)
    tree_id = new_id()
    repo.create_tree(tree_id, estate_id, 1, 1, 3)
    with pytest.raises(IntegrityError):
        repo.create_tree(tree_id, estate_id, 2, 2, 4)
    assert repo.get_estate_stats(estate_id).count == 1


def test_stats_of_empty_estate_are_zero(repo):
    estate_id = repo.create_estate(new_id(), 5, 5)
    assert repo.get_estate_stats(estate_id) == EstateStats(count=0, max=0, min=0, median=0.0)


def test_stats_match_api_scenario(repo):
    estate_id = repo.create_estate(new_id(), 5, 1)
    repo.create_tree(new_id(), estate_id, 2, 1, 10)
    repo.create_tree(new_id(), estate_id, 3, 1, 20)
    repo.create_tree(new_id(), estate_id, 4, 1, 10)
    stats = repo.get_estate_stats(estate_id)
    assert (stats.count, stats.min, stats.max, stats.median) == (3, 10, 20, 10.0)


def test_stats_median_interpolates_even_count(repo):
    estate_id = repo.create_estate(new_id(), 5, 1)
    repo.create_tree(new_id(), estate_id, 1, 1, 10)
    repo.create_tree(new_id(), estate_id, 2, 1, 20)
    stats = repo.get_estate_stats(estate_id)
    assert stats.median == 15.0
    assert stats.min <= stats.median <= stats.max


def test_stats_only_count_own_estate(repo):
    first = repo.create_estate(new_id(), 5, 1)
    second = repo.create_estate(new_id(), 6, 1)
    repo.create_tree(new_id(), first, 1, 1, 7)
    repo.create_tree(new_id(), second, 1, 1, 9)
    stats = repo.get_estate_stats(first)
    assert stats.count == 1
    assert stats.max == 7


def test_get_estate_trees_round_trip(repo):
    estate_id = repo.create_estate(new_id(), 5, 1)
    planted = {Tree(x=1, y=1, height=5), Tree(x=2, y=1, height=2), Tree(x=4, y=1, height=5)}
    for tree in planted:
        repo.create_tree(new_id(), estate_id, tree.x, tree.y, tree.height)
    result = repo.get_estate_trees(estate_id)
    assert result.estate == Estate(length=5, width=1)
    assert set(result.trees) == planted


def test_get_estate_trees_without_trees(repo):
    estate_id = repo.create_estate(new_id(), 3, 4)
    result = repo.get_estate_trees(estate_id)
    assert result.estate == Estate(length=3, width=4)
    assert result.trees == ()


def test_get_estate_trees_for_missing_estate_raises(repo):
    with pytest.raises(LookupError):
        repo.get_estate_trees(new_id())