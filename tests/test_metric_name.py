import pytest

from tagmetrics.metrics.errors import ErrMetricNameParsing, MetricsError, NameSyntaxError
from tagmetrics.metrics.metric import parse_metric_name


@pytest.mark.parametrize("name", ["http_reqs", "my metric", "", "a:b", "x,y"])
def test_plain_name_is_returned_unchanged(name):
    assert parse_metric_name(name) == (name, [])


def test_tags_are_returned_in_original_order():
    name, tags = parse_metric_name("req{status:200,method:GET}")
    assert name == "req"
    assert tags == ["status:200", "method:GET"]


def test_clauses_are_trimmed_but_not_split():
    name, tags = parse_metric_name("req{ status : 200 , url:http://x:80/a }")
    assert name == "req"
    assert tags == ["status : 200", "url:http://x:80/a"]


@pytest.mark.parametrize(
    "expr, detail",
    [
        ("req{status:200", "unmatched"),
        ("reqstatus:200}", "unmatched"),
        ("req}x{", "before opening"),
        ("req{a:b}x", "last position"),
        ("req{a}", "malformed"),
        ("req{a:}", "malformed"),
        ("req{:b}", "malformed"),
        ("req{}", "malformed"),
        ("req{a:b,}", "malformed"),
    ],
)
def test_malformed_expressions_raise_name_syntax_error(expr, detail):
    with pytest.raises(ErrMetricNameParsing) as excinfo:
        parse_metric_name(expr)
    assert detail in excinfo.value.detail
    assert excinfo.value.expression == expr
    assert str(excinfo.value).startswith("parsing metric name failed")


def test_malformed_clause_is_reported_verbatim():
    with pytest.raises(NameSyntaxError) as excinfo:
        parse_metric_name("req{status:200, method}")
    assert "' method'" in excinfo.value.detail


def test_name_syntax_error_is_a_metrics_and_value_error():
    with pytest.raises(MetricsError):
        parse_metric_name("req{")
    with pytest.raises(ValueError):
        parse_metric_name("req}")
