"""Ordering and capping of conflict issues for display."""

from typing import List

from .models import ConflictIssue, STRUCTURE, ROW, COLUMN, REGION, ADJACENCY


def summarize_issues(
    issues: List[ConflictIssue],
    max_issues: int = 5
) -> List[ConflictIssue]:
    """
    Order issues by level and cap how many are shown.

    Structural problems make rule conflicts meaningless, so when any
    STRUCTURE issue is present only those are returned. Otherwise issues are
    ordered row, column, region, adjacency (stable within a level).

    Args:
        issues: Issues to summarize
        max_issues: Maximum number of issues to return (default 5, at least 2)

    Returns:
        Summarized list; when truncated the last entry is an
        ADDITIONAL_ISSUES line counting the hidden ones
    """
    if not issues:
        return issues

    # Room for at least one real issue next to the summary line
    max_issues = max(max_issues, 2)

    structural = [issue for issue in issues if issue.level == STRUCTURE]
    if structural:
        result = structural
    else:
        order = {ROW: 0, COLUMN: 1, REGION: 2, ADJACENCY: 3}
        result = sorted(issues, key=lambda issue: order.get(issue.level, len(order)))

    if len(result) > max_issues:
        kept = result[:max_issues - 1]
        num_hidden = len(result) - len(kept)
        kept.append(ConflictIssue(
            code="ADDITIONAL_ISSUES",
            message=f"... and {num_hidden} more issue{'s' if num_hidden > 1 else ''}",
            level=result[0].level,
        ))
        return kept

    return list(result)
