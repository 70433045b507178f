"""Tests for hotspot ranking and the hotspot service."""
import random

import pytest

from churnscope.analyzer import FileComplexity
from churnscope.config import HotspotSettings
from churnscope.exceptions import ComplexityUnavailable, InvalidInput, NotVersionControlled
from churnscope.hotspots import find_hotspots, hotspots_to_dataframe, rank_hotspots

from conftest import commit_file, init_repo


def metrics(**complexities):
    """Build a complexity mapping from keyword arguments: name=(complexity, code_lines)."""
    return {
        f"{name}.py": FileComplexity(path=f"{name}.py", complexity=c, code_lines=lines)
        for name, (c, lines) in complexities.items()
    }


class TestRankHotspots:
    """Test suite for the join, score and sort."""

    def test_basic_ranking(self):
        churn = {"a.py": 10, "b.py": 5, "c.py": 1}
        complexity = metrics(a=(20, 200), b=(40, 300), c=(5, 50))

        hotspots = rank_hotspots(churn, complexity)

        assert [h.path for h in hotspots] == ["a.py", "b.py", "c.py"]
        assert hotspots[0].score == pytest.approx(0.5)
        assert hotspots[1].score == pytest.approx(0.5)
        assert hotspots[0].commit_count == 10
        assert hotspots[0].complexity == 20
        assert hotspots[0].code_lines == 200

    def test_inner_join_drops_unmatched(self):
        churn = {"kept.py": 3, "deleted.py": 9}
        complexity = metrics(kept=(4, 10), untouched=(50, 500))

        hotspots = rank_hotspots(churn, complexity)

        assert [h.path for h in hotspots] == ["kept.py"]
        assert hotspots[0].score == 1.0

    def test_empty_join(self):
        assert rank_hotspots({"a.py": 1}, metrics(b=(1, 1))) == []
        assert rank_hotspots({}, {}) == []
        assert rank_hotspots({}, metrics(b=(1, 1))) == []

    def test_zero_maximum_yields_zero_scores(self):
        hotspots = rank_hotspots({"a.py": 3, "b.py": 1}, metrics(a=(0, 10), b=(0, 20)))

        assert [h.score for h in hotspots] == [0.0, 0.0]
        assert rank_hotspots({"a.py": 0}, metrics(a=(0, 1)))[0].score == 0.0

    def test_ties_ordered_by_path(self):
        churn = {"z.py": 2, "m.py": 2, "a.py": 2}
        complexity = metrics(z=(3, 1), m=(3, 1), a=(3, 1))

        assert [h.path for h in rank_hotspots(churn, complexity)] == ["a.py", "m.py", "z.py"]

    def test_limit(self):
        churn = {f"f{i}.py": i + 1 for i in range(10)}
        complexity = {p: FileComplexity(path=p, complexity=10, code_lines=1) for p in churn}

        top = rank_hotspots(churn, complexity, limit=3)

        assert [h.path for h in top] == ["f9.py", "f8.py", "f7.py"]
        assert len(rank_hotspots(churn, complexity, limit=50)) == 10
        assert len(rank_hotspots(churn, complexity, limit=0)) == 1

    def test_default_limit(self):
        churn = {f"f{i:02d}.py": 1 for i in range(30)}
        complexity = {p: FileComplexity(path=p, complexity=1, code_lines=1) for p in churn}

        assert len(rank_hotspots(churn, complexity)) == 20

    def test_scores_in_unit_interval(self):
        rng = random.Random(42)
        for _ in range(25):
            paths = [f"f{i}.py" for i in range(rng.randint(1, 30))]
            churn = {p: rng.randint(1, 50) for p in paths}
            complexity = {
                p: FileComplexity(path=p, complexity=rng.randint(0, 100), code_lines=rng.randint(0, 900))
                for p in paths
            }

            hotspots = rank_hotspots(churn, complexity, limit=len(paths))

            max_commits = max(churn.values())
            max_complexity = max(c.complexity for c in complexity.values())
            for h in hotspots:
                assert 0.0 <= h.score <= 1.0
                at_both_maxima = h.commit_count == max_commits and h.complexity == max_complexity
                assert (h.score == 1.0) == (at_both_maxima and max_complexity > 0)
            assert [h.score for h in hotspots] == sorted((h.score for h in hotspots), reverse=True)

    def test_more_commits_never_lowers_rank(self):
        complexity = metrics(a=(10, 1), b=(10, 1), c=(10, 1))
        before = [h.path for h in rank_hotspots({"a.py": 2, "b.py": 3, "c.py": 4}, complexity)]
        after = [h.path for h in rank_hotspots({"a.py": 5, "b.py": 3, "c.py": 4}, complexity)]

        assert before.index("a.py") == 2
        assert after.index("a.py") == 0

    def test_idempotent(self):
        churn = {"a.py": 3, "b.py": 3, "c.py": 1}
        complexity = metrics(a=(5, 1), b=(5, 1), c=(9, 1))

        assert rank_hotspots(churn, complexity) == rank_hotspots(dict(reversed(churn.items())), complexity)

    def test_dataframe_columns(self):
        df = hotspots_to_dataframe(rank_hotspots({"a.py": 1}, metrics(a=(1, 2))))

        assert list(df.columns) == ["path", "commit_count", "complexity", "score", "code_lines"]
        assert hotspots_to_dataframe([]).empty

    def test_dataframe_from_dict_records(self):
        hotspots = rank_hotspots({"a.py": 2, "b.py": 1}, metrics(a=(4, 10), b=(2, 5)))

        df = hotspots_to_dataframe([h.to_dict() for h in hotspots])

        assert df["path"].tolist() == ["a.py", "b.py"]
        assert df.equals(hotspots_to_dataframe(hotspots))


class TestFindHotspots:
    """Test suite for the end-to-end hotspot service."""

    def test_hot_file_ranks_first(self, hotspot_repo):
        hotspots = find_hotspots(str(hotspot_repo), since="1 year ago")

        assert hotspots[0].path == "hot.go"
        assert hotspots[0].commit_count == 5
        assert hotspots[0].complexity == 5
        assert hotspots[0].score == 1.0
        # notes.txt has churn but is not source code
        assert [h.path for h in hotspots] == ["hot.go", "cold.go"]

    def test_default_since(self, hotspot_repo):
        assert len(find_hotspots(str(hotspot_repo))) == 2

    def test_limit(self, hotspot_repo):
        hotspots = find_hotspots(str(hotspot_repo), limit=1)

        assert [h.path for h in hotspots] == ["hot.go"]

    def test_non_positive_limit_uses_default(self, hotspot_repo):
        assert len(find_hotspots(str(hotspot_repo), limit=-4)) == 2

    def test_empty_repository(self, empty_git_repo):
        assert find_hotspots(str(empty_git_repo)) == []

    def test_deleted_file_excluded(self, temp_dir):
        repo = init_repo(temp_dir / "deletions")
        commit_file(repo, "gone.py", "if x:\n    pass\n", "add gone")
        commit_file(repo, "stays.py", "if y:\n    pass\n", "add stays")
        repo.index.remove(["gone.py"], working_tree=True)
        repo.index.commit("remove gone")

        hotspots = find_hotspots(str(temp_dir / "deletions"))

        assert [h.path for h in hotspots] == ["stays.py"]

    def test_subdirectory_of_repository(self, nested_repo):
        hotspots = find_hotspots(str(nested_repo / "app"))

        assert hotspots[0].path == "core.py"
        assert hotspots[0].commit_count == 3
        assert {h.path for h in hotspots} == {"core.py", "util.py"}

    def test_idempotent(self, nested_repo):
        assert find_hotspots(str(nested_repo)) == find_hotspots(str(nested_repo))

    def test_not_version_controlled(self, temp_dir):
        plain = temp_dir / "plain"
        plain.mkdir()
        (plain / "main.py").write_text("x = 1\n")

        with pytest.raises(NotVersionControlled):
            find_hotspots(str(plain))

    def test_missing_path(self, temp_dir):
        with pytest.raises(InvalidInput):
            find_hotspots(str(temp_dir / "missing"))

    def test_file_path(self, hotspot_repo):
        with pytest.raises(InvalidInput):
            find_hotspots(str(hotspot_repo / "hot.go"))

    def test_settings_file(self, hotspot_repo):
        (hotspot_repo / ".churnscope.yml").write_text("hotspots:\n  limit: 1\n")

        assert [h.path for h in find_hotspots(str(hotspot_repo))] == ["hot.go"]

    def test_explicit_settings(self, nested_repo):
        settings = HotspotSettings(exclude_dirs=["app"])

        hotspots = find_hotspots(str(nested_repo), settings=settings)

        assert [h.path for h in hotspots] == ["setup.py"]

    def test_settings_file_not_a_mapping(self, hotspot_repo):
        (hotspot_repo / ".churnscope.yml").write_text("- a\n- b\n")

        with pytest.raises(InvalidInput) as exc_info:
            find_hotspots(str(hotspot_repo))

        assert "top level must be a mapping" in str(exc_info.value)

    def test_unusual_file_names_are_ranked(self, temp_dir):
        repo = init_repo(temp_dir / "odd_names")
        commit_file(repo, 'we"ird.py', "if x:\n    pass\n", "add quoted name")
        commit_file(repo, "plain.py", "if y:\n    pass\n", "add plain")

        hotspots = find_hotspots(str(temp_dir / "odd_names"))

        assert sorted(h.path for h in hotspots) == ["plain.py", 'we"ird.py']

    def test_invalid_settings_file(self, hotspot_repo):
        (hotspot_repo / ".churnscope.yml").write_text("hotspots: [unclosed\n")

        with pytest.raises(InvalidInput):
            find_hotspots(str(hotspot_repo))

    def test_analyzer_failure_is_terminal(self, hotspot_repo, monkeypatch):
        from churnscope import hotspots as hotspots_module

        def failing_analysis(root, options=None):
            raise ComplexityUnavailable("analysis failed: engine exploded")

        monkeypatch.setattr(hotspots_module, "analyze_directory", failing_analysis)

        with pytest.raises(ComplexityUnavailable):
            find_hotspots(str(hotspot_repo))

    def test_no_analysis_without_churn(self, empty_git_repo, monkeypatch):
        from churnscope import hotspots as hotspots_module

        def unexpected_analysis(root, options=None):
            raise AssertionError("analyzer should not run")

        monkeypatch.setattr(hotspots_module, "analyze_directory", unexpected_analysis)

        assert find_hotspots(str(empty_git_repo)) == []
