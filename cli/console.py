"""Console UI for lexiclimb application."""

from core.config import ASSESSMENT_LENGTH, MAX_DIFFICULTY
from cli.api_client import LexiclimbAPIClient

RATING_LABELS = {1: "don't know it", 2: 'seen it', 3: 'roughly know it', 4: 'know it well'}
SLIDER_STEP = 5


class ConsoleUI:
    """Console user interface for lexiclimb application."""

    def __init__(self, client: LexiclimbAPIClient):
        self.client = client

    def print_card(self, card: dict):
        """Print the current flashcard."""
        print('\n' + '=' * 50)
        star = ' *' if card.get('starred') else ''
        print(f"Word {card['cursor'] + 1}/{card['total']} | Level {card['difficulty']:.0f}/{MAX_DIFFICULTY}{star}")
        print('=' * 50)
        print(f"\n  {card['word']}\n")
        if card['revealed']:
            print(f"  -> {card['definition']}\n")

    def print_assessment_word(self, assessment: dict):
        print('\n' + '-' * 50)
        print(f"Calibration {assessment['cursor'] + 1}/{assessment['length']} | Level {assessment['level']:.0f}")
        print('-' * 50)
        print(f"\n  {assessment['current_word']}\n")
        for score, label in RATING_LABELS.items():
            print(f"  {score} = {label}")

    def print_result(self, result: dict):
        """Print the summary of a finished round."""
        print('\n' + '=' * 50)
        print('Round Complete!')
        print('=' * 50)
        print(result['summary'])
        wrong = [item for item in result['items'] if not item['correct']]
        if wrong:
            print('\nWords added to your practice list:')
            for item in wrong:
                print(f"  {item['word']}: {item['definition']}")
        print('=' * 50 + '\n')

    def print_status(self, status: dict):
        """Print detailed status."""
        print('\n' + '=' * 50)
        print('STATUS SUMMARY')
        print('=' * 50)
        print(f"Current level: {status['difficulty']:.0f}/{status['max_difficulty']}")
        print(f"Rounds completed: {status['rounds_completed']}")
        print(f"Words to practice: {status['practice_count']}")
        print(f"Starred words: {status['starred_count']}")
        print('=' * 50 + '\n')

    def run_assessment(self, data: dict) -> dict | None:
        """Drive the calibration quiz. Returns the training round it hands over to."""
        print(f'\nCalibration: rate how well you know each of up to {ASSESSMENT_LENGTH} words.')
        print('Commands: 1-4 to rate, "skip" to finish early, "exit" to quit\n')
        while data['mode'] == 'assessment':
            self.print_assessment_word(data['assessment'])
            user_input = input('==> ').strip().lower()
            if user_input == 'exit':
                return None
            if user_input == 'skip':
                data = self.client.skip_assessment()
            elif user_input in ('1', '2', '3', '4'):
                data = self.client.rate_word(int(user_input))
            else:
                print('Please enter 1, 2, 3 or 4.')
        print(f"\nCalibrated level: {data['assessment']['level']:.0f}")
        return data['round']

    def run_round(self, card: dict) -> bool:
        """Drive a training round. Returns False if the user quit."""
        print('\nEnter to reveal / next, or type your definition and press Enter.')
        print('Commands: "b" back, "s" star, "+"/"-" difficulty, "q" end round, "exit" to quit\n')
        while not card['finished']:
            self.print_card(card)
            user_input = input('==> ').strip()
            command = user_input.lower()

            if command == 'exit':
                return False
            elif command == 'q':
                card = self.client.complete_round()
            elif command == 'b':
                card = self.client.retreat()
            elif command == 's':
                card = self.client.toggle_star()
            elif command in ('+', '-'):
                step = SLIDER_STEP if command == '+' else -SLIDER_STEP
                # Nudge from the latest card so server-side adjustments are kept
                difficulty = max(0, min(MAX_DIFFICULTY, card['difficulty'] + step))
                self.client.set_difficulty(difficulty)
                print(f'Difficulty will change to {difficulty:.0f}.')
            elif command == '':
                card = self.client.step()
            else:
                card = self.client.step(answer=user_input)

        if card.get('result'):
            self.print_result(card['result'])
        return True

    def run(self):
        """Run the main application loop."""
        # Check server connection
        try:
            health = self.client.health_check()
            print(f"Connected to lexiclimb server ({health['general_words']} general, "
                  f"{health['academic_words']} academic words)")
        except Exception:
            print(f"Error: Cannot connect to server at {self.client.base_url}")
            print("Make sure the server is running: python run_server.py")
            return

        status = self.client.get_status()
        self.print_status(status)

        while True:
            user_input = input('Start a round? [Enter = yes, "custom" = paste words, "exit"] ').strip().lower()
            if user_input == 'exit':
                print('Goodbye!')
                return

            custom_words = None
            if user_input == 'custom':
                print('Paste one word per line, finish with an empty line:')
                lines = []
                while True:
                    line = input()
                    if not line.strip():
                        break
                    lines.append(line)
                custom_words = '\n'.join(lines)

            try:
                data = self.client.start_round(custom_words)
            except Exception as e:
                print(f"Error starting round: {e}")
                continue

            card = data['round']
            if data['mode'] == 'assessment':
                card = self.run_assessment(data)
                if card is None:
                    print('Goodbye!')
                    return

            try:
                if not self.run_round(card):
                    print('Goodbye!')
                    return
            except Exception as e:
                print(f"Error during round: {e}")
