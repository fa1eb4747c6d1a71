"""Lexicon-based advertising compliance check.

Scores a text as ``100 - PENALTY_PER_FLAG * flags`` (floored at 0), where
every occurrence of a flagged phrase counts once, and maps the score to a
letter grade. Generation itself does not call this; grades on generated
variants are assigned at generation time.
"""

from seedcopy.schemas.copy import ComplianceGrade
from seedcopy.schemas.intake import ComplianceIssue, ComplianceResult

PENALTY_PER_FLAG = 11

GRADE_THRESHOLDS = (
    (90, ComplianceGrade.A),
    (70, ComplianceGrade.B),
)

# phrase -> suggested replacement
FLAGGED_PHRASES = {
    "冲鸭": "快试试",
    "无压力": "很划算",
    "最好": "很好",
    "第一": "很受欢迎",
    "100%": "大部分",
    "绝对": "真的",
    "根治": "改善",
    "无副作用": "温和",
    "立即见效": "坚持使用有变化",
    "永久": "持久",
    "顶级": "优质",
    "国家级": "专业",
}


def grade_for(score: int) -> ComplianceGrade:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return ComplianceGrade.C


def find_issues(text: str) -> list[ComplianceIssue]:
    issues = []
    for phrase, suggestion in FLAGGED_PHRASES.items():
        count = text.count(phrase)
        if count:
            issues.append(ComplianceIssue(text=phrase, suggestion=suggestion, count=count))
    return issues


def check_text(text: str, index: int = 0) -> ComplianceResult:
    issues = find_issues(text)
    flags = sum(issue.count for issue in issues)
    score = max(0, 100 - PENALTY_PER_FLAG * flags)
    return ComplianceResult(index=index, score=score, grade=grade_for(score), issues=issues)


def check_texts(texts: list[str]) -> list[ComplianceResult]:
    return [check_text(text, index) for index, text in enumerate(texts)]
