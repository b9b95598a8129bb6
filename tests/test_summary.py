from clearview.analyzers.summary import generate_summary, risk_level
from clearview.models.title_package import EncumbranceAnalysis, Flag, RiskLevel, Severity


def _flag(severity):
    return Flag(severity=severity, type="test", message="test")


def _analysis(make_doc, code, total, open_count):
    return EncumbranceAnalysis(
        total=total,
        satisfied=total - open_count,
        open=[make_doc(code, instrument=str(i)) for i in range(open_count)],
    )


def test_high_flag_always_wins():
    assert risk_level([_flag(Severity.HIGH)], open_liens=0, open_mortgages=0, scanned=False) == RiskLevel.HIGH
    assert risk_level(
        [_flag(Severity.MEDIUM), _flag(Severity.HIGH)], open_liens=3, open_mortgages=4, scanned=True
    ) == RiskLevel.HIGH


def test_medium_conditions():
    assert risk_level([_flag(Severity.MEDIUM)], 0, 0, False) == RiskLevel.MEDIUM
    assert risk_level([], open_liens=1, open_mortgages=0, scanned=False) == RiskLevel.MEDIUM
    assert risk_level([], open_liens=0, open_mortgages=2, scanned=True) == RiskLevel.MEDIUM


def test_open_mortgages_only_count_when_scanned():
    assert risk_level([], open_liens=0, open_mortgages=2, scanned=False) == RiskLevel.LOW
    assert risk_level([], open_liens=0, open_mortgages=1, scanned=True) == RiskLevel.LOW


def test_generate_summary_counts(make_doc):
    docs = [make_doc("MTG"), make_doc("MTG"), make_doc("LN")]
    mortgages = _analysis(make_doc, "MTG", total=2, open_count=1)
    liens = _analysis(make_doc, "LN", total=1, open_count=1)
    flags = [_flag(Severity.MEDIUM), _flag(Severity.MEDIUM)]

    summary = generate_summary(docs, [], mortgages, liens, flags, scanned=True, needs_manual_review=2)

    assert summary.total_documents == 3
    assert summary.chain_of_title_length == 0
    assert summary.total_mortgages == 2
    assert summary.satisfied_mortgages == 1
    assert summary.open_mortgages == 1
    assert summary.total_liens == 1
    assert summary.open_liens == 1
    assert summary.high_severity_flags == 0
    assert summary.medium_severity_flags == 2
    assert summary.needs_manual_review == 2
    assert summary.risk_level == RiskLevel.MEDIUM


def test_empty_summary_is_low():
    summary = generate_summary([], [], EncumbranceAnalysis(), EncumbranceAnalysis(), [])
    assert summary.risk_level == RiskLevel.LOW
    assert summary.total_documents == 0
