"""Interview question bank."""

import random
from dataclasses import dataclass


@dataclass(frozen=True)
class Question:
    """A coding question shown beside the editor."""

    id: str
    description: str
    difficulty: str  # "easy" | "medium" | "hard"


QUESTIONS: tuple[Question, ...] = (
    Question(
        "two_sum",
        "Given an array of integers nums and an integer target, return indices of the two numbers "
        "such that they add up to target.",
        "easy",
    ),
    Question(
        "reverse_string",
        "Write a function that reverses a string. The input string is given as an array of characters.",
        "easy",
    ),
    Question(
        "valid_palindrome",
        "Given a string s, return true if it is a palindrome (reads the same forward and backward), "
        "or false otherwise. Consider only alphanumeric characters and ignore cases.",
        "easy",
    ),
    Question(
        "merge_two_sorted_lists",
        "You are given the heads of two sorted linked lists. Merge the two lists into one sorted list "
        "by splicing together the nodes of the first two lists.",
        "easy",
    ),
    Question(
        "climbing_stairs",
        "You are climbing a staircase. It takes n steps to reach the top. Each time you can either "
        "climb 1 or 2 steps. In how many distinct ways can you climb to the top?",
        "easy",
    ),
    Question(
        "binary_tree_inorder",
        "Given the root of a binary tree, return the inorder traversal of its nodes' values.",
        "easy",
    ),
    Question(
        "maximum_subarray",
        "Given an integer array nums, find the contiguous subarray (containing at least one number) "
        "which has the largest sum and return its sum.",
        "medium",
    ),
    Question(
        "add_two_numbers",
        "You are given two non-empty linked lists representing two non-negative integers. The digits "
        "are stored in reverse order, and each of their nodes contains a single digit. Add the two "
        "numbers and return the sum as a linked list.",
        "medium",
    ),
    Question(
        "longest_substring",
        "Given a string s, find the length of the longest substring without repeating characters.",
        "medium",
    ),
    Question(
        "container_with_water",
        "You are given an integer array height of length n. There are n vertical lines drawn such "
        "that the two endpoints of the ith line are (i, 0) and (i, height[i]). Find two lines that "
        "together with the x-axis form a container that holds the most water.",
        "medium",
    ),
    Question(
        "median_sorted_arrays",
        "Given two sorted arrays nums1 and nums2 of size m and n respectively, return the median of "
        "the two sorted arrays.",
        "hard",
    ),
    Question(
        "regular_expression_matching",
        "Given an input string s and a pattern p, implement regular expression matching with support "
        "for '.' and '*' where '.' matches any single character and '*' matches zero or more of the "
        "preceding element.",
        "hard",
    ),
)


def random_question(rng: random.Random | None = None) -> Question:
    return (rng or random).choice(QUESTIONS)
