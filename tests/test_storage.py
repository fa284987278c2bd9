"""Tests for the file storage backend."""

import os
import tempfile
import unittest

from core.models import Learner, WordEntry
from server.file_storage import FileStorage


class TestFileStorage(unittest.TestCase):
    """Tests for JSON file persistence."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.storage = FileStorage(
            config_file=os.path.join(self.tmp.name, 'missing.json'),
            state_dir=self.tmp.name
        )

    def tearDown(self):
        self.tmp.cleanup()

    def test_load_state_missing_user(self):
        self.assertIsNone(self.storage.load_state('nobody'))

    def test_save_and_load_learner(self):
        learner = Learner()
        learner.starred = {'wary': 'cautious'}
        learner.toggle_star(WordEntry('lucid', 'clear', 27))
        learner.practice = {'emu': 'bird'}
        self.storage.save_state(learner.to_dict(), 'alice')

        restored = Learner.from_dict(self.storage.load_state('alice'))
        self.assertEqual(restored.starred, {'wary': 'cautious', 'lucid': 'clear'})
        self.assertEqual(restored.practice, {'emu': 'bird'})

    def test_corrupt_state_file_returns_none(self):
        with open(self.storage._get_state_file('bob'), 'w') as f:
            f.write('{not json')
        self.assertIsNone(self.storage.load_state('bob'))

    def test_list_and_delete_users(self):
        self.storage.save_state({}, 'default')
        self.storage.save_state({}, 'alice')
        self.assertEqual(self.storage.list_users(), ['alice', 'default'])
        self.assertTrue(self.storage.user_exists('alice'))
        self.assertTrue(self.storage.delete_user('alice'))
        self.assertFalse(self.storage.user_exists('alice'))
        self.assertFalse(self.storage.delete_user('alice'))

    def test_load_config_missing(self):
        with self.assertRaises(FileNotFoundError):
            self.storage.load_config()

    def test_load_config(self):
        path = os.path.join(self.tmp.name, 'config.json')
        with open(path, 'w') as f:
            f.write('{"gemini_api_key": "abc"}')
        storage = FileStorage(config_file=path, state_dir=self.tmp.name)
        self.assertEqual(storage.load_config(), {'gemini_api_key': 'abc'})


if __name__ == '__main__':
    unittest.main()
