"""Single-page SEO audit over already-crawled page data.

Eleven checks produce AuditCheck rows; category scores start from the pass
rate and lose 15 per critical and 5 per warning failure. The health score
blends on-page SEO (40%), technical (30%), trust (20%) and linking (10%).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from audit.text import round_half_up
from schemas.page_audit import (
    AuditCategory,
    AuditCheck,
    AuditPageData,
    AuditSeverity,
    FixItem,
    PageAuditContext,
    PageAuditResult,
)


# Used when no trust checks ran.
DEFAULT_TRUST_SCORE = 70

CRITICAL = AuditSeverity.critical
WARNING = AuditSeverity.warning
INFO = AuditSeverity.info


def _check(
    id: str,
    category: AuditCategory,
    name: str,
    passed: bool,
    severity: AuditSeverity,
    message: str,
    details: Optional[dict[str, Any]] = None,
) -> AuditCheck:
    return AuditCheck(
        id=id,
        category=category,
        name=name,
        passed=passed,
        severity=severity,
        message=message,
        details=details or {},
    )


def check_title(page: AuditPageData) -> AuditCheck:
    args = ("title-present", AuditCategory.seo, "Page Title")
    if not page.title:
        return _check(*args, False, CRITICAL, "Page is missing a title tag")

    length = len(page.title)
    details = {"length": length, "title": page.title}
    if length < 30:
        return _check(*args, False, WARNING, f"Title is too short ({length} chars). Aim for 50-60 characters.", details)
    if length > 60:
        return _check(
            *args,
            False,
            WARNING,
            f"Title may be truncated in search results ({length} chars). Aim for under 60 characters.",
            details,
        )
    return _check(*args, True, INFO, f"Title is good ({length} chars)", details)


def check_h1(page: AuditPageData) -> AuditCheck:
    args = ("h1-present", AuditCategory.seo, "H1 Heading")
    if not page.h1:
        return _check(*args, False, CRITICAL, "Page is missing an H1 heading")
    return _check(*args, True, INFO, "Page has an H1 heading", {"h1": page.h1})


def check_meta_description(page: AuditPageData) -> AuditCheck:
    args = ("meta-description", AuditCategory.seo, "Meta Description")
    if not page.meta_description:
        return _check(*args, False, WARNING, "Page is missing a meta description")

    length = len(page.meta_description)
    details = {"length": length, "description": page.meta_description}
    if length < 120:
        return _check(
            *args, False, INFO, f"Meta description is short ({length} chars). Aim for 150-160 characters.", details
        )
    if length > 160:
        return _check(
            *args, False, INFO, f"Meta description may be truncated ({length} chars). Aim for under 160 characters.", details
        )
    return _check(*args, True, INFO, f"Meta description is good ({length} chars)", details)


def check_canonical(page: AuditPageData) -> AuditCheck:
    args = ("canonical", AuditCategory.technical, "Canonical URL")
    if not page.canonical:
        return _check(*args, False, WARNING, "Page is missing a canonical tag")

    if page.canonical.rstrip("/") != page.url.rstrip("/"):
        return _check(
            *args,
            False,
            WARNING,
            "Canonical URL points to a different page",
            {"canonical": page.canonical, "page_url": page.url},
        )
    return _check(*args, True, INFO, "Canonical URL is correctly set", {"canonical": page.canonical})


def check_word_count(page: AuditPageData) -> AuditCheck:
    args = ("word-count", AuditCategory.content, "Content Length")
    wc = page.word_count
    if wc < 300:
        return _check(
            *args,
            False,
            CRITICAL,
            f"Page has thin content ({wc} words). Aim for at least 400 words for money/trust pages.",
            {"word_count": wc},
        )
    if wc < 500 and page.role in ("money", "trust"):
        return _check(
            *args,
            False,
            WARNING,
            f"{page.role} page could benefit from more content ({wc} words)",
            {"word_count": wc, "role": page.role},
        )
    return _check(*args, True, INFO, f"Good content length ({wc} words)", {"word_count": wc})


def check_internal_links(ctx: PageAuditContext) -> AuditCheck:
    args = ("internal-links", AuditCategory.seo, "Internal Links")
    details = {"links_out": ctx.internal_links_out, "links_in": ctx.internal_links_in}
    if ctx.internal_links_out < 2:
        return _check(
            *args,
            False,
            WARNING,
            f"Page has few outgoing internal links ({ctx.internal_links_out}). Add links to related pages.",
            details,
        )
    return _check(
        *args,
        True,
        INFO,
        f"Good internal linking ({ctx.internal_links_out} outgoing, {ctx.internal_links_in} incoming)",
        details,
    )


def check_orphan_page(ctx: PageAuditContext) -> AuditCheck:
    args = ("orphan-page", AuditCategory.technical, "Orphan Page")
    is_money = ctx.page.role == "money"
    if ctx.internal_links_in == 0:
        return _check(
            *args,
            False,
            CRITICAL if is_money else WARNING,
            "This is an orphan page with no internal links pointing to it",
        )
    if ctx.internal_links_in == 1 and is_money:
        return _check(
            *args,
            False,
            WARNING,
            "Money page has only 1 internal link pointing to it. Add more links from relevant pages.",
            {"links_in": 1},
        )
    return _check(
        *args,
        True,
        INFO,
        f"Page has {ctx.internal_links_in} internal links pointing to it",
        {"links_in": ctx.internal_links_in},
    )


def _duplicate_urls(ctx: PageAuditContext, field: str) -> list[str]:
    value = getattr(ctx.page, field)
    return [p.url for p in ctx.all_pages if p.id != ctx.page.id and getattr(p, field) == value]


def check_duplicate_title(ctx: PageAuditContext) -> AuditCheck:
    args = ("duplicate-title", AuditCategory.seo, "Unique Title")
    if not ctx.page.title:
        return _check(*args, False, CRITICAL, "Cannot check for duplicates - title is missing")
    dupes = _duplicate_urls(ctx, "title")
    if dupes:
        return _check(
            *args, False, CRITICAL, f"Title is duplicated on {len(dupes)} other page(s)", {"duplicate_urls": dupes}
        )
    return _check(*args, True, INFO, "Title is unique across the site")


def check_duplicate_h1(ctx: PageAuditContext) -> AuditCheck:
    args = ("duplicate-h1", AuditCategory.seo, "Unique H1")
    if not ctx.page.h1:
        return _check(*args, False, CRITICAL, "Cannot check for duplicates - H1 is missing")
    dupes = _duplicate_urls(ctx, "h1")
    if dupes:
        return _check(*args, False, WARNING, f"H1 is duplicated on {len(dupes)} other page(s)", {"duplicate_urls": dupes})
    return _check(*args, True, INFO, "H1 is unique across the site")


def check_duplicate_content(ctx: PageAuditContext) -> AuditCheck:
    args = ("duplicate-content", AuditCategory.content, "Unique Content")
    if not ctx.page.text_hash:
        return _check(*args, True, INFO, "No content hash available")
    dupes = _duplicate_urls(ctx, "text_hash")
    if dupes:
        return _check(
            *args,
            False,
            CRITICAL,
            f"Page content is duplicated on {len(dupes)} other page(s)",
            {"duplicate_urls": dupes},
        )
    return _check(*args, True, INFO, "Page content is unique")


def check_status_code(page: AuditPageData) -> AuditCheck:
    args = ("status-code", AuditCategory.technical, "HTTP Status")
    code = page.status_code
    if code >= 400:
        return _check(*args, False, CRITICAL, f"Page returns {code} error", {"status_code": code})
    if code >= 300:
        return _check(*args, False, WARNING, f"Page redirects ({code})", {"status_code": code})
    return _check(*args, True, INFO, f"Page returns {code} OK", {"status_code": code})


_PAGE_CHECKS: tuple[Callable[[PageAuditContext], AuditCheck], ...] = (
    lambda ctx: check_title(ctx.page),
    lambda ctx: check_h1(ctx.page),
    lambda ctx: check_meta_description(ctx.page),
    lambda ctx: check_canonical(ctx.page),
    lambda ctx: check_word_count(ctx.page),
    check_internal_links,
    check_orphan_page,
    check_duplicate_title,
    check_duplicate_h1,
    check_duplicate_content,
    lambda ctx: check_status_code(ctx.page),
)


def category_score(checks: list[AuditCheck]) -> int:
    if not checks:
        return 100
    passed = sum(1 for c in checks if c.passed)
    critical = sum(1 for c in checks if not c.passed and c.severity == CRITICAL)
    warnings = sum(1 for c in checks if not c.passed and c.severity == WARNING)

    score = passed / len(checks) * 100 - critical * 15 - warnings * 5
    return max(0, min(100, round_half_up(score)))


def run_page_audit(ctx: PageAuditContext | dict) -> PageAuditResult:
    ctx = PageAuditContext.coerce(ctx)
    checks = [run(ctx) for run in _PAGE_CHECKS]

    def in_category(category: AuditCategory) -> list[AuditCheck]:
        return [c for c in checks if c.category == category]

    seo_checks = in_category(AuditCategory.seo)
    trust_checks = in_category(AuditCategory.trust)

    seo_score = category_score(seo_checks)
    technical_score = category_score(in_category(AuditCategory.technical))
    content_score = category_score(in_category(AuditCategory.content))
    trust_score = category_score(trust_checks) if trust_checks else DEFAULT_TRUST_SCORE
    linking_score = category_score([c for c in seo_checks if "link" in c.id or "orphan" in c.id])

    health_score = round_half_up(
        seo_score * 0.4 + technical_score * 0.3 + trust_score * 0.2 + linking_score * 0.1
    )

    return PageAuditResult(
        checks=checks,
        health_score=health_score,
        technical_score=technical_score,
        content_score=content_score,
        trust_score=trust_score,
        linking_score=linking_score,
    )


# ---------------------------------------------------------------------------
# Fix items
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _FixTemplate:
    title: str
    why_it_matters: str
    fix_actions: tuple[str, ...]
    acceptance_criteria: tuple[str, ...]
    effort_estimate: str


FIX_TEMPLATES: dict[str, _FixTemplate] = {
    "title-present": _FixTemplate(
        title="Fix page title",
        why_it_matters="Page titles are crucial for SEO and user experience. They appear in search results and browser tabs.",
        fix_actions=(
            "Write a unique, descriptive title that includes the primary keyword",
            "Keep it between 50-60 characters",
            "Put the most important words at the beginning",
            "Include your brand name at the end if space allows",
        ),
        acceptance_criteria=(
            "Title is present",
            "Title is 50-60 characters",
            "Title is unique across the site",
            "Title accurately describes the page content",
        ),
        effort_estimate="low",
    ),
    "h1-present": _FixTemplate(
        title="Add H1 heading",
        why_it_matters="The H1 is the main heading of your page. It tells search engines and users what the page is about.",
        fix_actions=(
            "Add a single H1 heading at the top of the main content",
            "Include the primary keyword naturally",
            "Make it compelling and descriptive",
        ),
        acceptance_criteria=(
            "Page has exactly one H1",
            "H1 is unique across the site",
            "H1 accurately describes the page content",
        ),
        effort_estimate="low",
    ),
    "meta-description": _FixTemplate(
        title="Write meta description",
        why_it_matters="Meta descriptions appear in search results and influence click-through rates.",
        fix_actions=(
            "Write a compelling summary of the page (150-160 chars)",
            "Include a call-to-action",
            "Include the primary keyword naturally",
        ),
        acceptance_criteria=(
            "Meta description is present",
            "Length is 150-160 characters",
            "Description is unique across the site",
        ),
        effort_estimate="low",
    ),
    "canonical": _FixTemplate(
        title="Fix canonical URL",
        why_it_matters=(
            'Canonical tags tell search engines which version of a page is the "main" version '
            "to prevent duplicate content issues."
        ),
        fix_actions=(
            "Add a self-referencing canonical tag",
            "Ensure the canonical URL matches the page URL exactly",
        ),
        acceptance_criteria=(
            "Canonical tag is present",
            "Canonical URL points to the correct page",
        ),
        effort_estimate="low",
    ),
    "word-count": _FixTemplate(
        title="Expand page content",
        why_it_matters="Thin content provides less value to users and has lower chances of ranking well.",
        fix_actions=(
            "Add more valuable content relevant to the page topic",
            "Include FAQs to address common questions",
            "Add sections for benefits, process, or features",
            "Include trust signals (reviews, proof points)",
        ),
        acceptance_criteria=(
            "Page has at least 400 words",
            "Content answers user questions comprehensively",
            "Content is scannable with clear sections",
        ),
        effort_estimate="high",
    ),
    "internal-links": _FixTemplate(
        title="Add internal links",
        why_it_matters="Internal links help users navigate your site and distribute SEO value across pages.",
        fix_actions=(
            "Add links to related pages within the content",
            "Use descriptive anchor text",
            "Link to money pages from supporting content",
        ),
        acceptance_criteria=(
            "Page has at least 3 internal links",
            "Links use descriptive anchor text",
            "Links are contextually relevant",
        ),
        effort_estimate="low",
    ),
    "orphan-page": _FixTemplate(
        title="Link to this page",
        why_it_matters="Orphan pages are hard for users and search engines to find.",
        fix_actions=(
            "Add links to this page from relevant pages",
            "Consider adding to navigation if important",
            "Link from blog posts or related content",
        ),
        acceptance_criteria=(
            "Page has at least 2 internal links pointing to it",
            "Links come from relevant pages",
        ),
        effort_estimate="medium",
    ),
    "duplicate-title": _FixTemplate(
        title="Make title unique",
        why_it_matters="Duplicate titles confuse search engines and can hurt rankings.",
        fix_actions=("Write a unique title for this page", "Differentiate from similar pages"),
        acceptance_criteria=("Title is unique across the entire site",),
        effort_estimate="low",
    ),
    "duplicate-h1": _FixTemplate(
        title="Make H1 unique",
        why_it_matters="Duplicate H1s can confuse search engines about page differentiation.",
        fix_actions=("Write a unique H1 for this page", "Differentiate from pages with similar topics"),
        acceptance_criteria=("H1 is unique across the entire site",),
        effort_estimate="low",
    ),
    "duplicate-content": _FixTemplate(
        title="Address duplicate content",
        why_it_matters="Duplicate content wastes crawl budget and can lead to ranking issues.",
        fix_actions=(
            "Rewrite the content to be unique",
            "Or use canonical tag to point to the primary version",
            "Or consider merging/redirecting pages",
        ),
        acceptance_criteria=("Content is unique", "Or proper canonical/redirect is in place"),
        effort_estimate="high",
    ),
    "status-code": _FixTemplate(
        title="Fix HTTP error",
        why_it_matters="Error pages provide a poor user experience and waste crawl budget.",
        fix_actions=(
            "Restore the page content",
            "Or set up a redirect to a relevant page",
            "Remove internal links pointing to this URL",
        ),
        acceptance_criteria=("Page returns 200 status code", "Or appropriate redirect is in place"),
        effort_estimate="medium",
    ),
}


def _template_for(check: AuditCheck) -> _FixTemplate:
    template = FIX_TEMPLATES.get(check.id)
    if template is not None:
        return template
    return _FixTemplate(
        title=f"Fix: {check.name}",
        why_it_matters=check.message,
        fix_actions=("Review and fix the issue",),
        acceptance_criteria=("Issue is resolved",),
        effort_estimate="medium",
    )


def generate_fix_items(checks: list[AuditCheck]) -> list[FixItem]:
    """Fix items for failed checks; info-level failures are skipped."""
    items: list[FixItem] = []
    for check in checks:
        if check.passed or check.severity == INFO:
            continue
        t = _template_for(check)
        items.append(
            FixItem(
                severity=check.severity,
                category=check.category,
                title=t.title,
                description=check.message,
                why_it_matters=t.why_it_matters,
                fix_actions=list(t.fix_actions),
                acceptance_criteria=list(t.acceptance_criteria),
                effort_estimate=t.effort_estimate,
            )
        )
    return items
