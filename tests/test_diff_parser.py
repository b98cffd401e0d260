from issue_publisher.analysis.diff_parser import ChangeType, DiffParser

PATCH = "\n".join([
    "@@ -1,3 +1,4 @@",
    " keep",
    "-old",
    "+new",
    "+added",
    " tail",
    "@@ -20,2 +21,2 @@ def f():",
    " ctx",
    "-gone",
    "+here",
    "\\ No newline at end of file",
])


def test_maps_new_lines_to_diff_positions() -> None:
    file_patch = DiffParser().parse_patch("a.py", PATCH)

    assert file_patch.position_by_line() == {
        1: 1,   # keep
        2: 3,   # new
        3: 4,   # added
        4: 5,   # tail
        21: 7,  # ctx, after the second hunk header at position 6
        22: 9,  # here
    }


def test_counts_additions_and_deletions() -> None:
    file_patch = DiffParser().parse_patch("a.py", PATCH)

    assert (file_patch.additions, file_patch.deletions) == (3, 2)
    assert len(file_patch.hunks) == 2
    assert file_patch.hunks[1].header == "def f():"
    assert file_patch.hunks[1].new_start == 21
    removed = [line for line in file_patch.hunks[0].lines if line.change_type is ChangeType.REMOVED]
    assert removed[0].old_line_number == 2


def test_single_line_hunk_without_counts() -> None:
    file_patch = DiffParser().parse_patch("a.py", "@@ -1 +1 @@\n-a\n+b")

    assert file_patch.hunks[0].old_count == 1
    assert file_patch.position_by_line() == {1: 2}


def test_missing_patch_has_no_lines() -> None:
    file_patch = DiffParser().parse_patch("logo.png", None)

    assert file_patch.hunks == []
    assert file_patch.position_by_line() == {}
