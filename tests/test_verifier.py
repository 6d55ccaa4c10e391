"""Tests for the byte-level conflict verifier."""
import asyncio
import tempfile
import unittest
from pathlib import Path

from classdup import ArchiveIoError, ArtifactRef, Conflict, MissingEntryError
from classdup.utils.processor import Processor
from classdup.verifier import ConflictVerifier, order_archives, verify_contentions

from .test_utils import make_artifact, make_jar


class OrderArchivesTest(unittest.TestCase):
    def test_ranked_archives_first(self):
        a = ArtifactRef('a', 'x', '1')
        b = ArtifactRef('a', 'y', '1')
        c = ArtifactRef('a', 'z', '1')

        self.assertEqual([c, a, b], order_archives(frozenset({a, b, c}), {c: 0, a: 1, b: 2}))
        self.assertEqual([b, a, c], order_archives(frozenset({a, b, c}), {b: 0}))

    def test_coordinate_order_without_ranking(self):
        a = ArtifactRef('a', 'x', '1')
        b = ArtifactRef('a', 'x', '2')
        c = ArtifactRef('b', 'a', '1')

        self.assertEqual([a, b, c], order_archives(frozenset({c, b, a})))


class ConflictVerifierTest(unittest.TestCase):
    def _verify(self, contentions, ranking=None):
        with Processor(2) as processor:
            return asyncio.run(verify_contentions(contentions, processor, ranking))

    def test_identical_copies(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            a = make_artifact(Path(tmpdir), 'org.x:foo:1', {'P/Q.class': b'\xaa'})
            b = make_artifact(Path(tmpdir), 'org.x:bar:1', {'P/Q.class': b'\xaa'})

            self.assertEqual([], self._verify({'P/Q.class': frozenset({a, b})}, {a: 0, b: 1}))

    def test_differing_copies(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            a = make_artifact(Path(tmpdir), 'org.x:foo:1', {'P/Q.class': b'\xaa'})
            b = make_artifact(Path(tmpdir), 'org.x:bar:1', {'P/Q.class': b'\xab'})

            self.assertEqual(
                [Conflict('P/Q.class', a, b)],
                self._verify({'P/Q.class': frozenset({a, b})}, {a: 0, b: 1}))

    def test_first_differing_archive_is_the_offender(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            a = make_artifact(Path(tmpdir), 'a:x:1', {'m/M.class': b'\x01'})
            b = make_artifact(Path(tmpdir), 'a:y:1', {'m/M.class': b'\x02'})
            c = make_artifact(Path(tmpdir), 'a:z:1', {'m/M.class': b'\x03'})

            conflicts = self._verify({'m/M.class': frozenset({a, b, c})}, {a: 0, b: 1, c: 2})

            self.assertEqual([Conflict('m/M.class', a, b)], conflicts)

    def test_matching_archives_are_skipped(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            a = make_artifact(Path(tmpdir), 'a:x:1', {'m/M.class': b'\x01'})
            b = make_artifact(Path(tmpdir), 'a:y:1', {'m/M.class': b'\x01'})
            c = make_artifact(Path(tmpdir), 'a:z:1', {'m/M.class': b'\x02'})

            conflicts = self._verify({'m/M.class': frozenset({a, b, c})}, {a: 0, b: 1, c: 2})

            self.assertEqual([Conflict('m/M.class', a, c)], conflicts)

    def test_conflicts_sorted_by_class_name(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            names = ['z/Z.class', 'a/B.class', 'a/A.class', 'm/M$1.class']
            a = make_artifact(Path(tmpdir), 'a:x:1', {name: b'\x01' for name in names})
            b = make_artifact(Path(tmpdir), 'a:y:1', {name: b'\x02' for name in names})

            conflicts = self._verify({name: frozenset({a, b}) for name in names}, {a: 0, b: 1})

            self.assertEqual(['a.A', 'a.B', 'm.M$1', 'z.Z'], [c.class_name for c in conflicts])

    def test_vanished_entry_is_fatal(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            a = make_artifact(Path(tmpdir), 'a:x:1', {'m/M.class': b'\x01'})
            b = make_artifact(Path(tmpdir), 'a:y:1', {'m/M.class': b'\x01'})
            # Rewrite b without the indexed class
            make_jar(b.path, {'m/N.class': b'\x01'})

            with self.assertRaises(MissingEntryError) as cm:
                self._verify({'m/M.class': frozenset({a, b})}, {a: 0, b: 1})

            self.assertEqual('m/M.class', cm.exception.class_path)
            self.assertEqual('a:y:1', cm.exception.coordinates)

    def test_vanished_archive_is_fatal(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            a = make_artifact(Path(tmpdir), 'a:x:1', {'m/M.class': b'\x01'})
            b = make_artifact(Path(tmpdir), 'a:y:1', {'m/M.class': b'\x01'})
            b.path.unlink()

            with self.assertRaises(ArchiveIoError):
                self._verify({'m/M.class': frozenset({a, b})}, {a: 0, b: 1})

    def test_verify_single_class_path(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            a = make_artifact(Path(tmpdir), 'a:x:1', {'m/M.class': b'\x01'})
            b = make_artifact(Path(tmpdir), 'a:y:1', {'m/M.class': b'\x01\x00'})

            with Processor(1) as processor:
                verifier = ConflictVerifier(processor)
                conflict = asyncio.run(verifier.verify('m/M.class', [b, a]))

            self.assertEqual(Conflict('m/M.class', b, a), conflict)


if __name__ == '__main__':
    unittest.main()
