"""API tests for the FastAPI server, with in-memory storage."""

import unittest

from fastapi.testclient import TestClient

import server.app as app_module
from core.interfaces import Storage
from core.models import WordEntry
from core.sampler import percentile_window
from core.scheduling import Debouncer
from core.session import AlwaysCorrectGrader


class MockStorage(Storage):
    """Mock storage for testing."""

    def __init__(self):
        self.states = {}
        self.save_calls = []
        self.fail_saves = False

    def load_config(self) -> dict:
        return {}

    def load_state(self, user_id: str = "default") -> dict | None:
        return self.states.get(user_id)

    def save_state(self, state: dict, user_id: str = "default") -> None:
        if self.fail_saves:
            raise OSError("disk full")
        self.save_calls.append(user_id)
        self.states[user_id] = state

    def list_users(self) -> list[str]:
        return sorted(self.states)

    def user_exists(self, user_id: str) -> bool:
        return user_id in self.states

    def delete_user(self, user_id: str) -> bool:
        return self.states.pop(user_id, None) is not None


class ManualScheduler:
    """Holds debounced callbacks until the test fires them."""

    def __init__(self):
        self.callbacks = []

    def __call__(self, delay, callback):
        self.callbacks.append(callback)
        return self

    def cancel(self):
        self.callbacks = []

    def fire(self):
        callbacks, self.callbacks = self.callbacks, []
        for callback in callbacks:
            callback()


class TestAPI(unittest.TestCase):
    """End-to-end flows through the REST API."""

    def setUp(self):
        self.storage = MockStorage()
        app_module.storage = self.storage
        app_module.grader = AlwaysCorrectGrader()
        app_module.general_words = [WordEntry(f"word{i}", f"definition {i}", i) for i in range(1000)]
        app_module.academic_words = []
        for registry in (app_module.user_learners, app_module.user_lexicons, app_module.user_rounds,
                         app_module.user_assessments, app_module.user_debouncers):
            registry.clear()
        self.client = TestClient(app_module.app)

    def set_settings(self, **settings):
        response = self.client.post('/api/settings', json=settings)
        self.assertEqual(response.status_code, 200)
        return response.json()

    def test_root_reports_lexicon_sizes(self):
        data = self.client.get('/').json()
        self.assertEqual(data['service'], 'lexiclimb')
        self.assertEqual(data['general_words'], 1000)

    def test_settings_are_clamped(self):
        data = self.set_settings(difficulty=250, round_length=0)
        self.assertEqual(data['difficulty'], 100)
        self.assertEqual(data['round_length'], 1)

    def test_training_round_end_to_end(self):
        self.set_settings(round_length=10)
        data = self.client.post('/api/round/start', json={}).json()
        self.assertEqual(data['mode'], 'training')
        self.assertEqual(data['round']['total'], 10)
        self.assertIsNone(data['round']['definition'])

        card = self.client.post('/api/round/step', json={}).json()
        self.assertEqual(card['action'], 'revealed')
        self.assertIsNotNone(card['definition'])

        for _ in range(9):
            card = self.client.post('/api/round/advance', json={}).json()
            self.assertEqual(card['action'], 'advanced')
        card = self.client.post('/api/round/advance', json={}).json()
        self.assertEqual(card['action'], 'complete')
        self.assertTrue(card['finished'])
        self.assertEqual(card['result']['correct'], 9)
        self.assertEqual(card['result']['total'], 10)

        practice = self.client.get('/api/practice').json()
        self.assertEqual(practice['total'], 1)
        last = self.client.get('/api/results/last').json()
        self.assertEqual(last['wrong_words_text'], practice['words'][0]['word'])
        self.assertEqual(self.client.get('/api/status').json()['rounds_completed'], 1)

    def test_completing_twice_records_once(self):
        self.set_settings(round_length=5)
        self.client.post('/api/round/start', json={})
        self.client.post('/api/round/complete', json={})
        self.client.post('/api/round/complete', json={})
        self.assertEqual(self.client.get('/api/status').json()['rounds_completed'], 1)

    def test_no_active_round(self):
        response = self.client.post('/api/round/advance', json={})
        self.assertEqual(response.status_code, 400)
        response = self.client.post('/api/assessment/rate', json={'score': 3})
        self.assertEqual(response.status_code, 400)

    def test_custom_words_with_no_match_finishes_immediately(self):
        data = self.client.post('/api/round/start', json={'custom_words': 'zzz\nqqq'}).json()
        self.assertTrue(data['round']['finished'])
        self.assertEqual(data['round']['result']['total'], 0)

    def test_custom_words_restrict_round(self):
        self.set_settings(round_length=10)
        data = self.client.post('/api/round/start', json={'custom_words': 'WORD1\nword2'}).json()
        self.assertEqual(data['round']['total'], 2)
        self.assertIn(data['round']['word'], ('word1', 'word2'))

    def test_assessment_hands_over_to_training(self):
        self.set_settings(do_assessment=True, round_length=30)
        data = self.client.post('/api/round/start', json={}).json()
        self.assertEqual(data['mode'], 'assessment')
        self.assertEqual(data['assessment']['level'], 50)

        for _ in range(10):
            data = self.client.post('/api/assessment/rate', json={'score': 4}).json()
        self.assertEqual(data['assessment']['level'], 65)

        data = self.client.post('/api/assessment/skip', json={}).json()
        self.assertEqual(data['mode'], 'training')
        self.assertEqual(data['round']['total'], 30)
        self.assertEqual(data['round']['difficulty'], 65)
        self.assertEqual(self.client.get('/api/settings').json()['difficulty'], 65)

    def test_star_current_word(self):
        self.client.post('/api/round/start', json={})
        card = self.client.post('/api/round/star', json={}).json()
        self.assertTrue(card['starred'])
        starred = self.client.get('/api/starred').json()
        self.assertEqual(starred['words'][0]['word'], card['word'])

    def test_difficulty_change_is_deferred(self):
        self.client.post('/api/round/start', json={})
        data = self.client.post('/api/round/difficulty', json={'difficulty': 80}).json()
        self.assertTrue(data['pending'])
        self.assertEqual(self.client.get('/api/round').json()['difficulty'], 50)

    def test_difficulty_change_applies_after_quiet_period(self):
        self.set_settings(round_length=20)
        self.client.post('/api/round/start', json={})
        scheduler = ManualScheduler()
        app_module.user_debouncers['default'] = Debouncer(scheduler=scheduler)
        first = self.client.get('/api/round').json()['word']

        self.client.post('/api/round/difficulty', json={'difficulty': 60})
        self.client.post('/api/round/difficulty', json={'difficulty': 80})
        scheduler.fire()

        session = app_module.user_rounds['default']
        self.assertEqual(session.difficulty, 80)
        self.assertEqual(session.word_list[0].word, first)
        self.assertEqual(len(session.word_list), 20)
        start, end = percentile_window(1000, 80, 19)
        window = {e.word for e in app_module.general_words[start:end]}
        self.assertTrue({e.word for e in session.word_list[1:]} <= window)
        self.assertEqual(self.client.get('/api/settings').json()['difficulty'], 80)

    def test_delete_user_drops_in_memory_state(self):
        self.client.post('/api/round/start', json={})
        self.assertIn('default', app_module.user_lexicons)
        self.client.delete('/api/users/default')
        for registry in (app_module.user_learners, app_module.user_lexicons, app_module.user_rounds,
                         app_module.user_assessments, app_module.user_debouncers):
            self.assertNotIn('default', registry)

    def test_save_failures_do_not_break_round(self):
        self.set_settings(round_length=3)
        self.storage.fail_saves = True
        self.client.post('/api/round/start', json={})
        card = self.client.post('/api/round/complete', json={}).json()
        self.assertTrue(card['finished'])
        self.assertEqual(card['result']['total'], 3)


if __name__ == '__main__':
    unittest.main()
