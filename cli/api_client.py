"""REST API client for lexiclimb server."""

import requests
from typing import Optional


class LexiclimbAPIClient:
    """Client for communicating with the lexiclimb REST API."""

    def __init__(self, base_url: str = "http://localhost:8000", user_id: str = "default"):
        self.base_url = base_url.rstrip('/')
        self.user_id = user_id
        self.session = requests.Session()

    def _get(self, endpoint: str, params: dict = None) -> dict:
        """Make a GET request."""
        if params is None:
            params = {}
        params['user_id'] = self.user_id
        response = self.session.get(f"{self.base_url}{endpoint}", params=params)
        response.raise_for_status()
        return response.json()

    def _post(self, endpoint: str, data: dict = None) -> dict:
        """Make a POST request."""
        if data is None:
            data = {}
        data['user_id'] = self.user_id
        response = self.session.post(f"{self.base_url}{endpoint}", json=data)
        response.raise_for_status()
        return response.json()

    def health_check(self) -> dict:
        """Check if the server is running."""
        response = self.session.get(f"{self.base_url}/")
        response.raise_for_status()
        return response.json()

    def get_status(self) -> dict:
        """Get learner status and progress."""
        return self._get("/api/status")

    def get_settings(self) -> dict:
        return self._get("/api/settings")

    def update_settings(self, **changes) -> dict:
        return self._post("/api/settings", changes)

    def start_round(self, custom_words: Optional[str] = None) -> dict:
        """Start a calibration quiz or a training round, depending on settings."""
        return self._post("/api/round/start", {'custom_words': custom_words})

    def step(self, answer: Optional[str] = None) -> dict:
        """Reveal the definition, or move on if it is already shown."""
        return self._post("/api/round/step", {'answer': answer})

    def retreat(self) -> dict:
        return self._post("/api/round/retreat")

    def complete_round(self) -> dict:
        return self._post("/api/round/complete")

    def toggle_star(self) -> dict:
        return self._post("/api/round/star")

    def set_difficulty(self, difficulty: float) -> dict:
        return self._post("/api/round/difficulty", {'difficulty': difficulty})

    def rate_word(self, score: int) -> dict:
        """Submit a 1-4 confidence rating for the current calibration word."""
        return self._post("/api/assessment/rate", {'score': score})

    def skip_assessment(self) -> dict:
        return self._post("/api/assessment/skip")

    def get_practice_words(self) -> dict:
        return self._get("/api/practice")

    def get_starred_words(self) -> dict:
        return self._get("/api/starred")

    def get_last_result(self) -> dict:
        return self._get("/api/results/last")
