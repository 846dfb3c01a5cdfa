"""
Utility functions for the Exam System
"""


def score_answers(questions, answers):
    """
    Score a submission

    Args:
        questions: iterable of Question (or anything with id, points, correct_answer_index)
        answers: list of dicts with question_id and selected_index

    Returns:
        int: sum of points of correctly answered questions.
        Answers to questions outside ``questions`` score nothing.
    """
    by_id = {question.id: question for question in questions}
    total = 0
    for answer in answers:
        question = by_id.get(answer['question_id'])
        if question and answer['selected_index'] == question.correct_answer_index:
            total += question.points
    return total


def serialize_answers(answers):
    """Store answers the way clients send them (camelCase keys)"""
    return [
        {'questionId': answer['question_id'], 'selectedIndex': answer['selected_index']}
        for answer in answers
    ]
