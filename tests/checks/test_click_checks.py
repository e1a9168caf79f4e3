"""Tests for the click-through checks: clickTag usage, hard-coded URLs, GWD exports."""

from creative_audit.checks import ClickTagsCheck, GwdEnvironmentCheck, HardcodedClickUrlCheck
from creative_audit.checks.click_tags import scan_click_code
from creative_audit.config import AuditSettings
from creative_audit.models import OffenderCategory, Severity

META = '<meta name="ad.size" content="width=300,height=250">'


def _index(*lines):
    return "\n".join((META,) + lines)


class TestClickTagsCheck:
    def test_declared_and_used(self, make_context, make_bundle):
        bundle = make_bundle(
            {
                "index.html": _index(
                    '<script>var clickTag = "https://www.example.com";</script>',
                    '<div id="ad" onclick="window.open(clickTag)"></div>',
                )
            }
        )
        finding = ClickTagsCheck().execute(make_context(bundle))
        assert finding.severity is Severity.PASS
        assert finding.messages == (
            "clickTag detected and used for redirect",
            'URL temporarily set to "https://www.example.com"',
        )
        offender = finding.offenders[0]
        assert offender.line == 3
        assert offender.detail == 'clickTag usage: <div id="ad" onclick="window.open(clickTag)"></div>'
        assert offender.category is OffenderCategory.CODE

    def test_usage_in_linked_script(self, make_context, make_bundle):
        bundle = make_bundle(
            {
                "index.html": _index('<script src="exit.js"></script>'),
                "exit.js": "var clickTag = '';\nad.onclick = function () { window.open(window.clickTag); };",
            }
        )
        finding = ClickTagsCheck().execute(make_context(bundle))
        assert finding.severity is Severity.PASS
        assert finding.messages == ("clickTag detected and used for redirect",)
        assert [(o.path, o.line) for o in finding.offenders] == [("exit.js", 2)]

    def test_long_url_shortened(self, make_context, make_bundle):
        url = "https://www.example.com/" + "x" * 60
        bundle = make_bundle(
            {"index.html": _index(f'<script>var clickTag = "{url}"; top.location = clickTag;</script>')}
        )
        finding = ClickTagsCheck().execute(make_context(bundle))
        assert finding.messages[1] == f'URL temporarily set to "{url[:50]}..."'

    def test_no_click_handling(self, make_context, simple_bundle):
        finding = ClickTagsCheck().execute(make_context(simple_bundle))
        assert finding.severity is Severity.FAIL
        assert finding.messages == ("clickTag not detected", "No redirect mechanism found")
        assert finding.offenders == ()

    def test_literal_navigation_without_clicktag(self, make_context, make_bundle):
        bundle = make_bundle(
            {
                "index.html": _index('<script src="nav.js"></script>'),
                "nav.js": 'document.body.onclick = function () { window.open("https://brand.example/landing"); };',
            }
        )
        finding = ClickTagsCheck().execute(make_context(bundle))
        assert finding.severity is Severity.FAIL
        assert finding.messages == (
            "clickTag not detected",
            'Clickthrough URL is hardcoded to "https://brand.example/landing"',
        )
        assert finding.offenders[0].path == "nav.js"
        assert finding.offenders[0].detail.startswith("Hardcoded URL: document.body.onclick")

    def test_declared_but_anchor_used(self, make_context, make_bundle):
        bundle = make_bundle(
            {
                "index.html": _index(
                    '<script>var clickTag = "";</script>',
                    '<a href="https://brand.example/">Shop</a>',
                )
            }
        )
        finding = ClickTagsCheck().execute(make_context(bundle))
        assert finding.severity is Severity.FAIL
        assert finding.messages == (
            "clickTag detected but not used for redirect",
            'Clickthrough URL is hardcoded to "https://brand.example/"',
        )
        assert finding.offenders[0].line == 3

    def test_used_and_hardcoded(self, make_context, make_bundle):
        bundle = make_bundle(
            {
                "index.html": _index(
                    '<script>var clickTag = ""; ad.onclick = function () { window.open(clickTag); };</script>',
                    '<script>logo.onclick = function () { location.href = "https://brand.example/logo"; };</script>',
                )
            }
        )
        finding = ClickTagsCheck().execute(make_context(bundle))
        assert finding.severity is Severity.FAIL
        assert finding.messages[0] == "clickTag detected and used, but also has hardcoded URLs"

    def test_declared_and_unused(self, make_context, make_bundle):
        bundle = make_bundle({"index.html": _index('<script>var clickTag = "https://www.example.com";</script>')})
        finding = ClickTagsCheck().execute(make_context(bundle))
        assert finding.severity is Severity.FAIL
        assert finding.messages == ("clickTag detected but not used", "No redirect mechanism found")

    def test_enabler_exit_declares(self, make_context, make_bundle):
        bundle = make_bundle({"index.html": _index('<script>Enabler.exit("Background");</script>')})
        assert scan_click_code(make_context(bundle)).declared

    def test_configured_patterns(self, make_context, make_bundle):
        bundle = make_bundle({"index.html": _index("<script>ad.onclick = exitUrl;</script>")})
        assert not scan_click_code(make_context(bundle)).declared
        settings = AuditSettings(click_tag_patterns=(r"\bexitUrl\b",))
        assert scan_click_code(make_context(bundle, settings_override=settings)).declared

    def test_cm360_only(self):
        assert ClickTagsCheck.profiles == frozenset({"CM360"})


class TestHardcodedClickUrlCheck:
    def test_clean(self, make_context, simple_bundle):
        finding = HardcodedClickUrlCheck().execute(make_context(simple_bundle))
        assert finding.severity is Severity.PASS
        assert finding.messages == ("No hard-coded absolute clickthrough destinations found",)

    def test_window_open_literal_warns(self, make_context, make_bundle):
        bundle = make_bundle(
            {
                "index.html": _index('<script src="nav.js"></script>'),
                "nav.js": '\nad.onclick = function () { window.open("https://brand.example/a"); };',
            }
        )
        finding = HardcodedClickUrlCheck().execute(make_context(bundle))
        assert finding.severity is Severity.WARN
        assert finding.messages == (
            "1 hard-coded clickthrough destination detected (must be ad server provided)",
        )
        offender = finding.offenders[0]
        assert (offender.path, offender.line) == ("nav.js", 2)
        assert offender.detail == "window.open -> https://brand.example/a"

    def test_clicktag_value_and_anchor(self, make_context, make_bundle):
        bundle = make_bundle(
            {
                "index.html": _index(
                    '<script>var clickTag = "https://www.example.com";</script>',
                    '<a href="https://brand.example/">Shop</a>',
                )
            }
        )
        settings = AuditSettings(hardcoded_nav_severity="FAIL")
        finding = HardcodedClickUrlCheck().execute(make_context(bundle, settings_override=settings))
        assert finding.severity is Severity.FAIL
        assert finding.messages[0].startswith("2 hard-coded clickthrough destinations detected")
        details = [o.detail for o in finding.offenders]
        assert details[0] == "clickTag assign -> https://www.example.com"
        assert details[1] == 'anchor -> <a href="https://brand.example/">'

    def test_one_offender_per_line(self, make_context, make_bundle):
        bundle = make_bundle(
            {
                "index.html": _index(
                    '<script>top.location = "https://a.example/"; parent.location = "https://b.example/";</script>'
                )
            }
        )
        finding = HardcodedClickUrlCheck().execute(make_context(bundle))
        assert len(finding.offenders) == 1
        assert finding.offenders[0].detail == "top.location -> https://a.example/"


class TestGwdEnvironmentCheck:
    def test_plain_html(self, make_context, simple_bundle):
        finding = GwdEnvironmentCheck().execute(make_context(simple_bundle))
        assert finding.severity is Severity.PASS
        assert finding.messages == ("No Google Web Designer signatures detected",)

    def test_gwd_export_warns(self, make_context, make_bundle):
        bundle = make_bundle({"index.html": _index('<div class="gwd-page-wrapper"></div>')})
        finding = GwdEnvironmentCheck().execute(make_context(bundle))
        assert finding.severity is Severity.WARN
        assert finding.messages == ("Google Web Designer export detected",)
        offender = finding.offenders[0]
        assert offender.detail == "GWD signature found: gwd-page-wrapper"
        assert offender.line == 2
        assert offender.category is OffenderCategory.ENVIRONMENT

    def test_profile_mismatch_noted(self, make_context, make_bundle):
        bundle = make_bundle({"index.html": _index("<script>gwd.GWD_preventAutoplay = true;</script>")})
        settings = AuditSettings(profiles=("IAB",))
        finding = GwdEnvironmentCheck().execute(make_context(bundle, settings_override=settings))
        assert finding.severity is Severity.WARN
        assert finding.messages[1] == "Profile mismatch: verify environment configuration for CM360."
