from tagmetrics.metrics.tags import SampleTags, into_sample_tags


def test_equality_ignores_insertion_order():
    a = into_sample_tags({"a": "1", "b": "2"})
    b = into_sample_tags({"b": "2", "a": "1"})
    assert a.is_equal(b)
    assert a == b
    assert hash(a) == hash(b)


def test_different_values_are_not_equal():
    assert not SampleTags({"a": "1"}).is_equal(SampleTags({"a": "2"}))
    assert not SampleTags({"a": "1"}).is_equal(SampleTags({"a": "1", "b": "2"}))
    assert not SampleTags({}).is_equal(None)
    assert SampleTags().is_equal(SampleTags({}))


def test_contains_checks_subset_of_pairs():
    sample_tags = SampleTags({"status": "200", "method": "GET", "url": "/"})
    assert sample_tags.contains(SampleTags({"status": "200"}))
    assert sample_tags.contains(SampleTags({"method": "GET", "status": "200"}))
    assert sample_tags.contains(SampleTags())
    assert not sample_tags.contains(SampleTags({"status": "500"}))
    assert not sample_tags.contains(SampleTags({"name": ""}))


def test_values_are_coerced_to_strings_and_iterate_sorted():
    tags = SampleTags({"b": 2, "a": 1})
    assert list(tags) == [("a", "1"), ("b", "2")]
    assert tags.to_dict() == {"a": "1", "b": "2"}
    assert tags.get("a") == "1"
    assert tags.get("missing") is None
    assert "b" in tags
    assert len(tags) == 2
    assert repr(tags) == "SampleTags({a:1,b:2})"
