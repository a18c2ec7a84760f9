"""Tests for the question bank."""

import random

from mockingbird.questions import QUESTIONS, random_question


def test_question_ids_unique():
    ids = [q.id for q in QUESTIONS]
    assert len(ids) == len(set(ids))


def test_difficulties():
    assert {q.difficulty for q in QUESTIONS} == {"easy", "medium", "hard"}


def test_random_question_uses_rng():
    first = random_question(random.Random(3))
    second = random_question(random.Random(3))
    assert first == second
    assert first in QUESTIONS
