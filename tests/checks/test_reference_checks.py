"""Tests for reference-driven checks: missing, orphaned, insecure, external, absolute."""

from creative_audit.checks import (
    AssetReferencesCheck,
    ExternalResourcesCheck,
    HttpsOnlyCheck,
    OrphanAssetsCheck,
    RelativePathsCheck,
)
from creative_audit.checks.external_resources import is_allowed
from creative_audit.checks.helpers import missing_references
from creative_audit.config import AuditSettings
from creative_audit.models import OffenderCategory, Reference, ReferenceType, Severity

META = '<meta name="ad.size" content="width=300,height=250">'


class TestAssetReferencesCheck:
    def test_all_present(self, make_context, simple_bundle):
        finding = AssetReferencesCheck().execute(make_context(simple_bundle))
        assert finding.severity is Severity.PASS

    def test_missing_reported_with_origin(self, make_context, make_bundle):
        bundle = make_bundle(
            {
                "index.html": META + '<link rel="stylesheet" href="css/a.css">',
                "css/a.css": ".x {\n background: url(../img/gone.png) }",
            }
        )
        finding = AssetReferencesCheck().execute(make_context(bundle))
        assert finding.severity is Severity.FAIL
        offender = finding.offenders[0]
        assert offender.path == "css/a.css"
        assert offender.detail == "../img/gone.png referenced from css/a.css"
        assert offender.line == 2
        assert offender.category is OffenderCategory.ASSETS

    def test_severity_from_settings(self, make_context, make_bundle):
        bundle = make_bundle({"index.html": META + '<img src="gone.png">'})
        settings = AuditSettings(missing_asset_severity="WARN")
        finding = AssetReferencesCheck().execute(make_context(bundle, settings_override=settings))
        assert finding.severity is Severity.WARN

    def test_data_uri_is_not_missing(self, make_context, make_bundle):
        bundle = make_bundle({"index.html": META + '<img src="data:image/gif;base64,R0lGOD">'})
        assert AssetReferencesCheck().execute(make_context(bundle)).severity is Severity.PASS


class TestOrphanAssetsCheck:
    def test_no_orphans(self, make_context, simple_bundle):
        assert OrphanAssetsCheck().execute(make_context(simple_bundle)).severity is Severity.PASS

    def test_orphan_found(self, make_context, make_bundle, simple_files):
        files = dict(simple_files, **{"img/unused.png": b"x", ".DS_Store": b""})
        finding = OrphanAssetsCheck().execute(make_context(make_bundle(files)))
        assert finding.severity is Severity.WARN
        assert [o.path for o in finding.offenders] == ["img/unused.png"]
        assert finding.offenders[0].detail == "Not referenced by primary asset graph"


class TestHttpsOnlyCheck:
    def test_insecure_script(self, make_context, make_bundle):
        bundle = make_bundle(
            {"index.html": META + '<script src="http://cdn.example.com/lib.js"></script>'}
        )
        finding = HttpsOnlyCheck().execute(make_context(bundle))
        assert finding.severity is Severity.FAIL
        assert finding.offenders[0].detail == "http://cdn.example.com/lib.js"

    def test_secure_and_protocol_relative_pass(self, make_context, make_bundle):
        bundle = make_bundle(
            {
                "index.html": META
                + '<script src="https://cdn.example.com/a.js"></script>'
                + '<script src="//cdn.example.com/b.js"></script>'
            }
        )
        assert HttpsOnlyCheck().execute(make_context(bundle)).severity is Severity.PASS


class TestIsAllowed:
    def test_host(self):
        assert is_allowed("https://fonts.gstatic.com/s/a.bin", ("fonts.gstatic.com",), ())

    def test_filetype(self):
        assert is_allowed("https://cdn.x.com/f/Font.WOFF2?v=1", (), (".woff2",))

    def test_neither(self):
        assert not is_allowed("https://cdn.x.com/lib.js", ("fonts.gstatic.com",), (".woff",))


class TestExternalResourcesCheck:
    def test_none(self, make_context, simple_bundle):
        finding = ExternalResourcesCheck().execute(make_context(simple_bundle))
        assert finding.severity is Severity.PASS
        assert finding.messages == ("No external resources referenced",)

    def test_allowlisted_and_not(self, make_context, make_bundle):
        bundle = make_bundle(
            {
                "index.html": META
                + '<link rel="stylesheet" href="https://fonts.googleapis.com/css?family=Roboto">'
                + '<script src="https://cdn.example.com/lib.js"></script>'
                + '<a href="https://advertiser.example.com">click</a>'
            }
        )
        finding = ExternalResourcesCheck().execute(make_context(bundle))
        assert finding.severity is Severity.WARN
        assert [o.detail for o in finding.offenders] == ["External: https://cdn.example.com/lib.js"]
        assert finding.messages == ("2 external reference(s), 1 outside allowlist",)


class TestRelativePathsCheck:
    def test_root_relative_from_subdirectory(self, make_context, make_bundle):
        bundle = make_bundle(
            {"sub/page.html": META + '<img src="/assets/a.png">', "assets/a.png": b"x"}
        )
        context = make_context(bundle)
        ref = next(r for r in context.references if r.url == "/assets/a.png")
        assert ref.in_zip
        assert ref.normalized == "assets/a.png"

        finding = RelativePathsCheck().execute(context)
        assert finding.severity is Severity.WARN
        assert finding.offenders[0].path == "sub/page.html"
        assert finding.offenders[0].detail == "/assets/a.png"

    def test_relative_passes(self, make_context, simple_bundle):
        assert RelativePathsCheck().execute(make_context(simple_bundle)).severity is Severity.PASS


class TestMissingReferences:
    def test_only_unresolved_local_targets(self):
        refs = [
            Reference("index.html", ReferenceType.IMAGE, "a.png", "a.png", in_zip=True),
            Reference("index.html", ReferenceType.IMAGE, "gone.png", "gone.png"),
            Reference("index.html", ReferenceType.IMAGE, "https://cdn.example/b.png", external=True),
            Reference("index.html", ReferenceType.IMAGE, "data:image/gif;base64,R0"),
        ]
        assert [r.url for r in missing_references(refs)] == ["gone.png"]
