import random
import unittest

from santa_draw.services.derangement import (
    cycle_lengths,
    find_cycles,
    generate_derangement,
    is_valid_assignment,
)


class CountingRandom(random.Random):
    def __init__(self, seed=None):
        super().__init__(seed)
        self.shuffles = 0

    def shuffle(self, x):
        self.shuffles += 1
        super().shuffle(x)


class TestGenerateDerangement(unittest.TestCase):

    def setUp(self):
        self.rng = random.Random(2024)

    def test_output_is_permutation_without_self_or_mutual_pairs(self):
        for n in range(3, 16):
            names = [f"p{i}" for i in range(n)]
            for _ in range(20):
                result = generate_derangement(names, rng=self.rng)
                self.assertIsNotNone(result)
                self.assertEqual(sorted(result), sorted(names))
                pos = {name: i for i, name in enumerate(names)}
                for i, receiver in enumerate(result):
                    self.assertNotEqual(receiver, names[i])
                    self.assertNotEqual(result[pos[receiver]], names[i])

    def test_every_cycle_has_at_least_three_members(self):
        names = [f"p{i}" for i in range(9)]
        for _ in range(200):
            result = generate_derangement(names, rng=self.rng)
            self.assertTrue(all(length >= 3 for length in cycle_lengths(names, result)))

    def test_three_people_form_one_of_two_circles(self):
        seen = set()
        for _ in range(200):
            result = generate_derangement(["A", "B", "C"], rng=self.rng)
            self.assertIn(result, (["B", "C", "A"], ["C", "A", "B"]))
            seen.add(tuple(result))
        self.assertEqual(len(seen), 2)

    def test_four_people_always_form_a_single_circle(self):
        names = ["A", "B", "C", "D"]
        seen = set()
        for _ in range(500):
            result = generate_derangement(names, rng=self.rng)
            self.assertEqual(cycle_lengths(names, result), [4])
            seen.add(tuple(result))
        # there are exactly 3! = 6 four-cycles
        self.assertEqual(len(seen), 6)

    def test_two_people_fail_without_shuffling(self):
        rng = CountingRandom(1)
        self.assertIsNone(generate_derangement(["A", "B"], rng=rng))
        self.assertEqual(rng.shuffles, 0)

    def test_too_few_people_fail(self):
        self.assertIsNone(generate_derangement([], rng=self.rng))
        self.assertIsNone(generate_derangement(["A"], rng=self.rng))

    def test_duplicates_fail(self):
        self.assertIsNone(generate_derangement(["A", "B", "A", "C"], rng=self.rng))

    def test_exhausted_budget_returns_none(self):
        rng = CountingRandom(7)
        self.assertIsNone(generate_derangement(list("ABCDE"), max_attempts=0, rng=rng))
        self.assertEqual(rng.shuffles, 0)

    def test_attempts_are_bounded(self):
        class NoopRandom(CountingRandom):
            def shuffle(self, x):
                self.shuffles += 1

        rng = NoopRandom()
        self.assertIsNone(generate_derangement(list("ABCDE"), max_attempts=25, rng=rng))
        self.assertEqual(rng.shuffles, 25)

    def test_input_is_not_mutated(self):
        names = ["A", "B", "C", "D", "E"]
        result = generate_derangement(names, rng=self.rng)
        self.assertEqual(names, ["A", "B", "C", "D", "E"])
        self.assertIsNot(result, names)

    def test_default_random_source(self):
        result = generate_derangement(["A", "B", "C", "D", "E", "F"])
        self.assertTrue(is_valid_assignment(["A", "B", "C", "D", "E", "F"], result))


class TestIsValidAssignment(unittest.TestCase):

    def test_accepts_long_cycle(self):
        self.assertTrue(is_valid_assignment(["A", "B", "C"], ["B", "C", "A"]))

    def test_rejects_self_gift(self):
        self.assertFalse(is_valid_assignment(["A", "B", "C", "D"], ["A", "C", "D", "B"]))

    def test_rejects_mutual_pair(self):
        self.assertFalse(is_valid_assignment(["A", "B", "C", "D"], ["B", "A", "D", "C"]))

    def test_rejects_non_permutation(self):
        self.assertFalse(is_valid_assignment(["A", "B", "C"], ["B", "C", "C"]))
        self.assertFalse(is_valid_assignment(["A", "B", "C"], ["B", "C"]))
        self.assertFalse(is_valid_assignment(["A", "B", "C"], ["B", "C", "X"]))


class TestFindCycles(unittest.TestCase):

    def test_mixed_cycles_in_input_order(self):
        original = ["A", "B", "C", "D", "E"]
        result = ["B", "A", "D", "E", "C"]
        self.assertEqual(find_cycles(original, result), [["A", "B"], ["C", "D", "E"]])

    def test_identity_gives_singletons(self):
        self.assertEqual(find_cycles(["A", "B", "C"], ["A", "B", "C"]), [["A"], ["B"], ["C"]])

    def test_empty(self):
        self.assertEqual(find_cycles([], []), [])

    def test_cycle_starts_at_first_member_and_follows_receivers(self):
        original = ["A", "B", "C", "D"]
        result = ["C", "A", "D", "B"]
        self.assertEqual(find_cycles(original, result), [["A", "C", "D", "B"]])

    def test_cycles_partition_any_permutation(self):
        rng = random.Random(99)
        original = [f"p{i}" for i in range(12)]
        for _ in range(100):
            result = original[:]
            rng.shuffle(result)
            cycles = find_cycles(original, result)
            members = [m for c in cycles for m in c]
            self.assertEqual(sorted(members), sorted(original))

            receiver = dict(zip(original, result))
            for cycle in cycles:
                x = cycle[0]
                for step in range(1, len(cycle) + 1):
                    x = receiver[x]
                    if step < len(cycle):
                        self.assertNotEqual(x, cycle[0])
                self.assertEqual(x, cycle[0])

    def test_is_deterministic(self):
        original = list("ABCDEFG")
        result = list("CDEFGAB")
        self.assertEqual(find_cycles(original, result), find_cycles(original, result))
        self.assertEqual(cycle_lengths(original, result), [7])


if __name__ == "__main__":
    unittest.main()
