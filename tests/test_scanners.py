"""Tests for property list trees, application records and Tomcat credentials."""

import os
import plistlib
import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

from host_records.collectors.items import collect_info_plist_paths
from host_records.collectors.plist_tree import PlistTree, load_plist, parse_plist
from host_records.config import Config
from host_records.models import AppMetadataRow, CredentialPair, ErrorKind, Result
from host_records.scanners.apps import extract_app_metadata, load_app_metadata, scan_applications
from host_records.scanners.tomcat import (
    extract_credentials,
    extract_credentials_from_path,
    scan_tomcat_users,
)

BAD_DATE_PLIST = (
    b"<?xml version='1.0'?><plist version=\"1.0\"><dict>"
    b"<key>Built</key><date>not-a-date</date></dict></plist>"
)

PHOTO_BOOTH_INFO = {
    "BuildMachineOSBuild": "13A451",
    "CFBundleDevelopmentRegion": "English",
    "CFBundleExecutable": "Photo Booth",
    "CFBundleIdentifier": "com.apple.PhotoBooth",
    "CFBundleInfoDictionaryVersion": "6.0",
    "CFBundlePackageType": "APPL",
    "CFBundleShortVersionString": "6.0",
    "CFBundleSignature": "PhBo",
    "CFBundleVersion": "517",
    "DTCompiler": "com.apple.compilers.llvm.clang.1_0",
    "LSApplicationCategoryType": "public.app-category.entertainment",
    "LSMinimumSystemVersion": "10.7.0",
    "CFBundleDocumentTypes": [
        {"CFBundleTypeName": "Photo Booth Library", "LSItemContentTypes": ["com.apple.photobooth-library"]},
    ],
}


def make_bundle(parent: str, name: str, info: dict | None = None, raw: bytes | None = None) -> str:
    """Create <parent>/<name>.app/Contents/Info.plist and return the plist path."""
    contents = Path(parent, f"{name}.app", "Contents")
    contents.mkdir(parents=True)
    plist = contents / "Info.plist"
    plist.write_bytes(raw if raw is not None else plistlib.dumps(info or {}))
    return str(plist)


class RaisingTree:
    """Tree whose lookups fail."""

    def get(self, key_path):
        raise KeyError(key_path)

    def children(self, key_path=""):
        return []


class TestPlistTree(unittest.TestCase):
    """Test property list tree access."""

    def setUp(self):
        self.tree = PlistTree({
            "Name": "Foo",
            "Enabled": True,
            "Disabled": False,
            "Count": 3,
            "Ratio": 1.5,
            "Built": datetime(2014, 1, 2, 3, 4, 5),
            "Blob": b"\x00\x01",
            "Nested": {"Inner": {"Value": "deep"}},
            "Items": ["zero", {"Key": "one"}],
        })

    def test_scalar_values(self):
        """Test scalars are returned as strings."""
        self.assertEqual(self.tree.get("Name"), "Foo")
        self.assertEqual(self.tree.get("Enabled"), "true")
        self.assertEqual(self.tree.get("Disabled"), "false")
        self.assertEqual(self.tree.get("Count"), "3")
        self.assertEqual(self.tree.get("Ratio"), "1.5")
        self.assertEqual(self.tree.get("Built"), "2014-01-02T03:04:05")

    def test_dotted_paths(self):
        """Test dictionary keys and array indexes in dotted paths."""
        self.assertEqual(self.tree.get("Nested.Inner.Value"), "deep")
        self.assertEqual(self.tree.get("Items.0"), "zero")
        self.assertEqual(self.tree.get("Items.1.Key"), "one")

    def test_missing_and_non_scalar(self):
        """Test missing paths, containers and binary data give None."""
        self.assertIsNone(self.tree.get("Missing"))
        self.assertIsNone(self.tree.get("Nested.Missing.Value"))
        self.assertIsNone(self.tree.get("Items.7"))
        self.assertIsNone(self.tree.get("Items.x"))
        self.assertIsNone(self.tree.get("Items.\u00b2"))
        self.assertIsNone(self.tree.get("Items.-1"))
        self.assertIsNone(self.tree.get("Name.Sub"))
        self.assertIsNone(self.tree.get("Nested"))
        self.assertIsNone(self.tree.get("Blob"))

    def test_children(self):
        """Test listing dictionary and array children."""
        keys = [key for key, _ in self.tree.children("Nested")]
        self.assertEqual(keys, ["Inner"])

        items = self.tree.children("Items")
        self.assertEqual([key for key, _ in items], ["0", "1"])
        self.assertEqual(items[1][1].get("Key"), "one")

        self.assertEqual(self.tree.children("Name"), [])
        self.assertEqual(len(self.tree.children()), 9)

    def test_parse_xml_and_binary(self):
        """Test both plist encodings parse."""
        for fmt in (plistlib.FMT_XML, plistlib.FMT_BINARY):
            result = parse_plist(plistlib.dumps({"CFBundleName": "Foo"}, fmt=fmt))
            self.assertTrue(result)
            self.assertEqual(result.value.get("CFBundleName"), "Foo")

    def test_parse_malformed(self):
        """Test malformed content is a parse error."""
        malformed = [
            b"",
            b"not a plist",
            b"<?xml version='1.0'?><plist><dict><key>a</key>",
            BAD_DATE_PLIST,
            b"<plist><dict><key>a</key></dict></plist>",
            b"<plist><dict><array></dict></plist>",
        ]
        for content in malformed:
            result = parse_plist(content)
            self.assertFalse(result, content)
            self.assertEqual(result.error, ErrorKind.PARSE_ERROR)

    def test_parse_non_dictionary_root(self):
        """Test a plist whose root is not a dictionary is rejected."""
        result = parse_plist(plistlib.dumps(["a", "b"]))
        self.assertEqual(result.error, ErrorKind.PARSE_ERROR)

    def test_load_missing(self):
        """Test read failures propagate unchanged."""
        self.assertEqual(load_plist("/definitely/missing/Info.plist").error, ErrorKind.NOT_FOUND)


class TestAppMetadata(unittest.TestCase):
    """Test application record extraction."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = self.temp_dir.name

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_parse_info_plist(self):
        """Test the full row for a typical Info.plist."""
        tree = parse_plist(plistlib.dumps(PHOTO_BOOTH_INFO)).value
        expected = {
            "name": "Foobar.app",
            "path": "/Applications/Foobar.app",
            "bundle_executable": "Photo Booth",
            "bundle_identifier": "com.apple.PhotoBooth",
            "bundle_name": "",
            "bundle_short_version": "6.0",
            "bundle_version": "517",
            "bundle_package_type": "APPL",
            "compiler": "com.apple.compilers.llvm.clang.1_0",
            "development_region": "English",
            "display_name": "",
            "info_string": "",
            "minimum_system_version": "10.7.0",
            "category": "public.app-category.entertainment",
            "applescript_enabled": "",
            "copyright": "",
        }
        row = extract_app_metadata("/Applications/Foobar.app/Contents/Info.plist", tree)
        self.assertEqual(row.as_row(), expected)

    def test_empty_tree(self):
        """Test a tree without keys yields only the path-derived fields."""
        row = extract_app_metadata("/Users/me/Applications/Foo Bar.app/Contents/Info.plist", PlistTree({}))
        values = row.as_row()
        self.assertEqual(values.pop("name"), "Foo Bar.app")
        self.assertEqual(values.pop("path"), "/Users/me/Applications/Foo Bar.app")
        self.assertEqual(len(values), 14)
        self.assertTrue(all(value == "" for value in values.values()))

    def test_name_and_path_never_come_from_tree(self):
        """Test tree keys named like row fields do not leak into the row."""
        tree = PlistTree({"name": "Wrong.app", "path": "/wrong", "CFBundleName": "Right"})
        row = extract_app_metadata("/Applications/Right.app/Contents/Info.plist", tree)
        self.assertEqual(row.name, "Right.app")
        self.assertEqual(row.path, "/Applications/Right.app")
        self.assertEqual(row.bundle_name, "Right")

    def test_boolean_key(self):
        """Test boolean plist values are rendered as strings."""
        tree = PlistTree({"NSAppleScriptEnabled": True})
        row = extract_app_metadata("/Applications/Foo.app/Contents/Info.plist", tree)
        self.assertEqual(row.applescript_enabled, "true")

    def test_unexpected_path_shape(self):
        """Test an odd path degrades to empty name and path, not an error."""
        row = extract_app_metadata("/tmp/Info.plist", PlistTree({"CFBundleName": "Foo"}))
        self.assertEqual(row.name, "")
        self.assertEqual(row.path, "")
        self.assertEqual(row.bundle_name, "Foo")

    def test_load_app_metadata(self):
        """Test reading a bundle's Info.plist from disk."""
        plist = make_bundle(self.root, "Photo Booth", PHOTO_BOOTH_INFO)
        result = load_app_metadata(plist)
        self.assertTrue(result)
        self.assertIsInstance(result.value, AppMetadataRow)
        self.assertEqual(result.value.name, "Photo Booth.app")
        self.assertEqual(result.value.path, os.path.join(self.root, "Photo Booth.app"))
        self.assertEqual(result.value.bundle_identifier, "com.apple.PhotoBooth")

    def test_load_app_metadata_malformed(self):
        """Test a corrupt Info.plist is a parse error."""
        plist = make_bundle(self.root, "Broken", raw=b"<plist><dict><key>")
        result = load_app_metadata(plist)
        self.assertFalse(result)
        self.assertEqual(result.error, ErrorKind.PARSE_ERROR)

    def test_load_app_metadata_bad_date(self):
        """Test an Info.plist with an unparseable date is a parse error."""
        plist = make_bundle(self.root, "Dated", raw=BAD_DATE_PLIST)
        result = load_app_metadata(plist)
        self.assertEqual(result.error, ErrorKind.PARSE_ERROR)
        self.assertIsNone(result.value)

    def test_load_app_metadata_tree_error(self):
        """Test a failing tree yields a parse error and no row."""
        with patch("host_records.scanners.apps.load_plist", return_value=Result.success(RaisingTree())):
            result = load_app_metadata("/Applications/Foo.app/Contents/Info.plist")
        self.assertEqual(result.error, ErrorKind.PARSE_ERROR)
        self.assertIsNone(result.value)

    def test_collect_info_plist_paths(self):
        """Test bundle discovery skips non-bundles and missing directories."""
        foo = make_bundle(self.root, "Foo")
        bar = make_bundle(self.root, "Bar Baz")
        Path(self.root, "NoPlist.app").mkdir()
        Path(self.root, "Folder").mkdir()
        Path(self.root, "file.app").write_text("not a bundle")

        paths = collect_info_plist_paths([self.root, os.path.join(self.root, "missing")])
        self.assertEqual(paths, sorted([foo, bar]))

    def test_scan_applications(self):
        """Test scanning returns rows for readable bundles only."""
        make_bundle(self.root, "Good", {"CFBundleIdentifier": "com.example.good"})
        make_bundle(self.root, "Broken", raw=b"garbage")

        with self.assertLogs("host_records.scanners.apps", level="WARNING") as logs:
            rows = scan_applications(Config(app_dirs=[self.root]))

        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].name, "Good.app")
        self.assertEqual(rows[0].bundle_identifier, "com.example.good")
        self.assertTrue(any("Broken.app" in line for line in logs.output))

    def test_scan_applications_skips_bad_date(self):
        """Test a bundle with a bad date in its Info.plist does not stop the scan."""
        make_bundle(self.root, "Alpha", {"CFBundleName": "Alpha"})
        make_bundle(self.root, "Dated", raw=BAD_DATE_PLIST)
        make_bundle(self.root, "Omega", {"CFBundleName": "Omega"})

        with self.assertLogs("host_records.scanners.apps", level="WARNING") as logs:
            rows = scan_applications(Config(app_dirs=[self.root]))

        self.assertEqual([row.name for row in rows], ["Alpha.app", "Omega.app"])
        self.assertTrue(any("Dated.app" in line for line in logs.output))

class TestTomcatCredentials(unittest.TestCase):
    """Test Tomcat users credential extraction."""

    def test_users_in_document_order(self):
        """Test pairs come back in document order."""
        result = extract_credentials(
            '<tomcat-users><user username="a" password="b"/><user username="c" password="d"/></tomcat-users>'
        )
        self.assertTrue(result)
        self.assertEqual(
            [(pair.username, pair.password) for pair in result.value],
            [("a", "b"), ("c", "d")]
        )

    def test_missing_password(self):
        """Test a user without a password fails without a partial list."""
        result = extract_credentials('<tomcat-users><user username="a"/></tomcat-users>')
        self.assertFalse(result)
        self.assertEqual(result.error, ErrorKind.PARSE_ERROR)
        self.assertIsNone(result.value)

    def test_bad_user_after_good_ones(self):
        """Test earlier valid users are not returned when a later one is bad."""
        result = extract_credentials(
            '<tomcat-users>'
            '<user username="a" password="b"/>'
            '<user password="orphan"/>'
            '</tomcat-users>'
        )
        self.assertEqual(result.error, ErrorKind.PARSE_ERROR)
        self.assertIsNone(result.value)
        self.assertIn("username", result.message)

    def test_missing_attribute_counts_users_only(self):
        """Test the reported user number ignores roles and comments before it."""
        result = extract_credentials(
            '<tomcat-users>'
            '<role rolename="manager-gui"/>'
            '<!-- admin account -->'
            '<user username="a" password="b"/>'
            '<user username="c"/>'
            '</tomcat-users>'
        )
        self.assertEqual(result.error, ErrorKind.PARSE_ERROR)
        self.assertIn("#1 ", result.message)
        self.assertIn("password", result.message)

    def test_malformed_xml(self):
        """Test unterminated markup is a parse error."""
        for content in ['<tomcat-users><user username="a" password="b">', "", "not xml at all"]:
            result = extract_credentials(content)
            self.assertFalse(result, content)
            self.assertEqual(result.error, ErrorKind.PARSE_ERROR)

    def test_unencodable_text(self):
        """Test text holding a lone surrogate is a parse error, not an exception."""
        result = extract_credentials("<tomcat-users>\ud800</tomcat-users>")
        self.assertFalse(result)
        self.assertEqual(result.error, ErrorKind.PARSE_ERROR)

    def test_wrong_root(self):
        """Test a document without a tomcat-users root is a parse error."""
        result = extract_credentials('<users><user username="a" password="b"/></users>')
        self.assertEqual(result.error, ErrorKind.PARSE_ERROR)
        self.assertIn("tomcat-users", result.message)

    def test_empty_users_file(self):
        """Test a root without users yields an empty tuple."""
        result = extract_credentials("<tomcat-users/>")
        self.assertTrue(result)
        self.assertEqual(result.value, ())

    def test_stock_tomcat_file(self):
        """Test a namespaced file with roles and comments, as shipped with Tomcat."""
        content = b"""<?xml version="1.0" encoding="UTF-8"?>
<!-- Licensed to the Apache Software Foundation (ASF) -->
<tomcat-users xmlns="http://tomcat.apache.org/xml"
              xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
              version="1.0">
  <!-- <user username="commented" password="out"/> -->
  <role rolename="manager-gui"/>
  <user username="tomcat" password="s3cret" roles="manager-gui"/>
  <user username="admin" password="" roles="admin-gui"/>
</tomcat-users>
"""
        result = extract_credentials(content)
        self.assertTrue(result)
        self.assertEqual(result.value, (
            CredentialPair(username="tomcat", password="s3cret"),
            CredentialPair(username="admin", password=""),
        ))

    def test_entity_expansion_refused(self):
        """Test entity declarations are refused rather than expanded."""
        content = (
            '<?xml version="1.0"?>'
            '<!DOCTYPE tomcat-users [<!ENTITY pw "expanded">]>'
            '<tomcat-users><user username="a" password="&pw;"/></tomcat-users>'
        )
        result = extract_credentials(content)
        self.assertEqual(result.error, ErrorKind.PARSE_ERROR)

    def test_from_path(self):
        """Test reading credentials from a file."""
        with tempfile.TemporaryDirectory() as root:
            path = os.path.join(root, "tomcat-users.xml")
            Path(path).write_text('<tomcat-users><user username="u" password="p"/></tomcat-users>')
            result = extract_credentials_from_path(path)
        self.assertTrue(result)
        self.assertEqual(result.value, (CredentialPair(username="u", password="p"),))

    def test_from_missing_path(self):
        """Test a read failure propagates unchanged."""
        result = extract_credentials_from_path("/definitely/missing/tomcat-users.xml")
        self.assertEqual(result.error, ErrorKind.NOT_FOUND)

    def test_scan_tomcat_users(self):
        """Test scanning several files keeps only successful ones."""
        with tempfile.TemporaryDirectory() as root:
            good = os.path.join(root, "good.xml")
            bad = os.path.join(root, "bad.xml")
            Path(good).write_text('<tomcat-users><user username="u" password="p"/></tomcat-users>')
            Path(bad).write_text('<tomcat-users><user username="u"/></tomcat-users>')

            with self.assertLogs("host_records.scanners.tomcat", level="WARNING") as logs:
                found = scan_tomcat_users([good, bad, os.path.join(root, "missing.xml")])

        self.assertEqual(found, [(good, (CredentialPair(username="u", password="p"),))])
        self.assertTrue(any("bad.xml" in line for line in logs.output))

    def test_scan_tomcat_users_from_config(self):
        """Test configured files are used when no paths are given."""
        with tempfile.TemporaryDirectory() as root:
            path = os.path.join(root, "tomcat-users.xml")
            Path(path).write_text("<tomcat-users/>")
            found = scan_tomcat_users(config=Config(tomcat_users_files=[path]))
        self.assertEqual(found, [(path, ())])


if __name__ == "__main__":
    unittest.main()
