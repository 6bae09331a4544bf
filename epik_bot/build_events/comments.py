"""Comment bodies for build lifecycle messages."""


def format_build_start_comment(acceptance_criteria: list[str]) -> str:
    """Build-start comment with the acceptance criteria as an unchecked checklist."""
    lines = ["🔨 **Starting implementation** — acceptance criteria:", ""]

    if not acceptance_criteria:
        lines.append("_(no acceptance criteria listed)_")
    else:
        lines.extend(f"- [ ] {criterion}" for criterion in acceptance_criteria)

    return "\n".join(lines)


def format_pr_summary_comment(pr_number: int, pr_url: str) -> str:
    return "\n".join(
        [
            f"✅ **Pull request [#{pr_number}]({pr_url}) created** — "
            "implementation is ready for review.",
            "",
            "This pull request was opened automatically by @epik-agent as part of the build.",
        ]
    )


def format_feature_complete_comment(total_issues: int) -> str:
    issue_word = "issue" if total_issues == 1 else "issues"
    return "\n".join(
        [
            f"🎉 **Feature complete** — all {total_issues} {issue_word} "
            "implemented and merged.",
            "",
            "The build finished successfully. Every acceptance criterion has been satisfied.",
        ]
    )


def format_build_failed_comment(reason: str) -> str:
    return "\n".join(
        [
            "❌ **Build failed**",
            "",
            f"> {reason}",
            "",
            "The build encountered an error and could not complete. Check the logs for details.",
        ]
    )
