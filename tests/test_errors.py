from issue_publisher.observability.errors import ErrorTracker, get_error_tracker


def test_tracker_keeps_only_recent_errors() -> None:
    tracker = ErrorTracker(max_errors=3)

    for i in range(5):
        tracker.capture_exception(RuntimeError(f"boom {i}"), "cycle failed")

    assert len(tracker.errors) == 3
    assert [e.exception_message for e in tracker.get_errors()] == ["boom 4", "boom 3", "boom 2"]
    assert [e.exception_message for e in tracker.get_errors(limit=1)] == ["boom 4"]


def test_default_cap() -> None:
    tracker = ErrorTracker()

    for i in range(ErrorTracker.MAX_ERRORS + 10):
        tracker.capture_exception(ValueError(str(i)), "cycle failed")

    assert len(tracker.errors) == ErrorTracker.MAX_ERRORS


def test_captured_error_records_traceback_and_context() -> None:
    tracker = ErrorTracker()
    try:
        raise KeyError("missing")
    except KeyError as e:
        error_id = tracker.capture_exception(e, "cycle failed", {"pr": 7})

    [record] = tracker.errors
    assert record.error_id == error_id
    assert record.exception_type == "KeyError"
    assert "raise KeyError" in record.traceback
    assert record.context == {"pr": 7}


def test_global_tracker_is_shared() -> None:
    assert get_error_tracker() is get_error_tracker()
