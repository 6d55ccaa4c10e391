"""Tests for artifact discovery from filesystem paths."""
import tempfile
import unittest
from pathlib import Path

from classdup import ArtifactRef
from classdup.host.discovery import (
    artifact_for_path,
    discover_artifacts,
    parse_properties,
    read_maven_coordinates,
    split_file_name,
)

from ..test_utils import make_jar


POM_PROPERTIES = b"""#Generated by Maven
#Tue Jan 02 10:00:00 UTC 2024
groupId=org.example
artifactId=widgets
version=2.1.0
"""


class PropertiesTest(unittest.TestCase):
    def test_parse_properties(self):
        properties = parse_properties("# comment\n! other comment\n\na=1\nb : two words\nc\n")
        self.assertEqual({'a': '1', 'b': 'two words', 'c': ''}, properties)

    def test_split_file_name(self):
        self.assertEqual(('foo', '1.0'), split_file_name('foo-1.0'))
        self.assertEqual(('commons-lang3', '3.12.0'), split_file_name('commons-lang3-3.12.0'))
        self.assertEqual(('guava', '33.0.0-jre'), split_file_name('guava-33.0.0-jre'))
        self.assertEqual(('plain', 'unknown'), split_file_name('plain'))


class ArtifactForPathTest(unittest.TestCase):
    def test_coordinates_from_pom_properties(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            jar = make_jar(Path(tmpdir) / 'renamed.jar', {
                'META-INF/maven/org.example/widgets/pom.properties': POM_PROPERTIES,
                'org/example/Widget.class': b'\xca\xfe',
            })

            self.assertEqual(('org.example', 'widgets', '2.1.0'), read_maven_coordinates(jar))
            artifact = artifact_for_path(jar)
            self.assertEqual(ArtifactRef('org.example', 'widgets', '2.1.0', 'jar'), artifact)
            self.assertEqual(jar, artifact.path)

    def test_coordinates_from_file_name(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            jar = make_jar(Path(tmpdir) / 'shaded-all-1.4.jar', {
                'META-INF/maven/a/one/pom.properties': b'groupId=a\nartifactId=one\nversion=1\n',
                'META-INF/maven/b/two/pom.properties': b'groupId=b\nartifactId=two\nversion=2\n',
            })

            self.assertIsNone(read_maven_coordinates(jar))
            self.assertEqual(ArtifactRef('unknown', 'shaded-all', '1.4', 'jar'), artifact_for_path(jar))

    def test_test_jar(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            jar = make_jar(Path(tmpdir) / 'foo-1.0-tests.jar', {'Foo.class': b'\x01'})

            self.assertEqual(ArtifactRef('unknown', 'foo', '1.0', 'test-jar'), artifact_for_path(jar))

    def test_other_extensions_keep_their_type(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            war = make_jar(Path(tmpdir) / 'app-1.war', {'WEB-INF/classes/App.class': b'\x01'})

            self.assertEqual('war', artifact_for_path(war).type)

    def test_unreadable_jar_named_from_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / 'broken-3.jar'
            path.write_bytes(b'garbage')

            with self.assertLogs('classdup.host.discovery', level='WARNING'):
                artifact = artifact_for_path(path)
            self.assertEqual(ArtifactRef('unknown', 'broken', '3', 'jar'), artifact)


class DiscoverArtifactsTest(unittest.TestCase):
    def test_directories_are_searched_in_sorted_order(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            make_jar(root / 'lib' / 'b-1.jar', {})
            make_jar(root / 'lib' / 'a-1.jar', {})
            make_jar(root / 'lib' / 'nested' / 'c-1.jar', {})
            (root / 'lib' / 'notes.txt').write_text('not an archive')

            artifacts = discover_artifacts([root / 'lib'])

            self.assertEqual(['a', 'b', 'c'], [artifact.name for artifact in artifacts])

    def test_explicit_paths_keep_argument_order(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            b = make_jar(root / 'b-1.jar', {})
            a = make_jar(root / 'a-1.jar', {})
            missing = root / 'missing-1.jar'

            artifacts = discover_artifacts([b, a, missing])

            self.assertEqual([b, a, missing], [artifact.path for artifact in artifacts])

    def test_same_coordinates_kept_once(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            first = make_jar(root / 'one' / 'foo-1.jar', {})
            second = make_jar(root / 'two' / 'foo-1.jar', {})

            with self.assertLogs('classdup.host.discovery', level='WARNING') as cm:
                artifacts = discover_artifacts([root / 'one', root / 'two'])

            self.assertEqual([first], [artifact.path for artifact in artifacts])
            self.assertEqual(
                [f"WARNING:classdup.host.discovery:{second} has the same coordinates as {first}, "
                 f"keeping {first}"],
                cm.output)


if __name__ == '__main__':
    unittest.main()
