"""
Validators for the Exam System
"""


class ExamValidator:
    """
    Validates exam payloads before anything is written
    """

    @staticmethod
    def validate_question(question_data):
        """
        Validate a single multiple-choice question

        Args:
            question_data: dict with question_text, options, correct_answer_index, points

        Returns:
            tuple: (is_valid, error_message)
        """
        text = (question_data.get('question_text') or '').strip()
        options = question_data.get('options')
        index = question_data.get('correct_answer_index')
        points = question_data.get('points')

        if not text:
            return False, "Question text is required"

        if not isinstance(options, list) or len(options) < 2:
            return False, "A question needs at least 2 options"

        if any(not isinstance(option, str) or not option.strip() for option in options):
            return False, "Options must be non-empty strings"

        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < len(options):
            return False, f"Correct answer index must be between 0 and {len(options) - 1}"

        if not isinstance(points, int) or isinstance(points, bool) or points < 0:
            return False, "Points cannot be negative"

        return True, ""

    @staticmethod
    def validate_questions(questions):
        """
        Validate the whole question list of a new exam

        Returns:
            tuple: (is_valid, error_message)
        """
        if not isinstance(questions, list) or not questions:
            return False, "An exam needs at least one question"

        for position, question in enumerate(questions, start=1):
            if not isinstance(question, dict):
                return False, f"Question {position}: Malformed question"
            is_valid, error_message = ExamValidator.validate_question(question)
            if not is_valid:
                return False, f"Question {position}: {error_message}"

        return True, ""

    @staticmethod
    def validate_answers(answers):
        """
        Validate submitted answers: a list of {question_id, selected_index}

        Returns:
            tuple: (is_valid, error_message)
        """
        if not isinstance(answers, list):
            return False, "Answers must be a list"

        seen = set()
        for answer in answers:
            if not isinstance(answer, dict):
                return False, "Each answer needs an integer questionId and selectedIndex"
            question_id = answer.get('question_id')
            selected_index = answer.get('selected_index')
            if not isinstance(question_id, int) or not isinstance(selected_index, int):
                return False, "Each answer needs an integer questionId and selectedIndex"
            if question_id in seen:
                return False, f"Question {question_id} answered more than once"
            seen.add(question_id)

        return True, ""
