from __future__ import annotations

import sys
import unittest
from array import array
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).resolve().parents[3]))

from bandit_exploration.engine import (  # noqa: E402
    BufferSpan,
    ExplorationError,
    ExplorationStatus,
    as_span,
    check_status,
    clamp_action,
    enforce_minimum_probability,
    generate_bag,
    generate_epsilon_greedy,
    generate_softmax,
    is_valid_pdf,
    pdf_total,
)


class BufferSpanTests(unittest.TestCase):
    def test_default_span_covers_whole_buffer(self) -> None:
        span = as_span([1.0, 2.0, 3.0])
        self.assertTrue(span.is_valid())
        self.assertEqual(span.length, 3)
        self.assertEqual(list(span.indices), [0, 1, 2])

    def test_as_span_passes_spans_through(self) -> None:
        span = BufferSpan([1.0, 2.0], start=1)
        self.assertIs(as_span(span), span)

    def test_invalid_spans(self) -> None:
        buffer = [0.0] * 3
        self.assertFalse(BufferSpan(buffer, start=2, stop=1).is_valid())
        self.assertFalse(BufferSpan(buffer, start=-1).is_valid())
        self.assertFalse(BufferSpan(buffer, start=0, stop=4).is_valid())
        self.assertFalse(BufferSpan(buffer, start=4).is_valid())
        self.assertTrue(BufferSpan(buffer, start=3).is_valid())
        self.assertEqual(BufferSpan(buffer, start=3).length, 0)

    def test_span_over_list_is_hashable(self) -> None:
        buffer = [0.5, 0.5]
        span = BufferSpan(buffer, start=1)
        self.assertIsInstance(hash(span), int)
        self.assertIn(span, {span})
        self.assertNotEqual(span, BufferSpan(buffer, start=1))

    def test_head(self) -> None:
        span = BufferSpan([0.0] * 6, start=2, stop=5).head(2)
        self.assertEqual(list(span.indices), [2, 3])


class ContractHelperTests(unittest.TestCase):
    def test_clamp_action(self) -> None:
        self.assertEqual(clamp_action(2, 5), 2)
        self.assertEqual(clamp_action(5, 5), 4)
        self.assertEqual(clamp_action(-1, 5), 0)

    def test_pdf_total_over_span(self) -> None:
        self.assertAlmostEqual(pdf_total(BufferSpan([9.0, 0.25, 0.75], start=1)), 1.0)

    def test_is_valid_pdf(self) -> None:
        self.assertTrue(is_valid_pdf([0.2, 0.3, 0.5]))
        self.assertTrue(is_valid_pdf([0.2, 0.3, 0.5 + 1e-8]))
        self.assertFalse(is_valid_pdf([0.2, 0.3, 0.6]))
        self.assertFalse(is_valid_pdf([-0.1, 0.6, 0.5]))
        self.assertFalse(is_valid_pdf([]))
        self.assertTrue(is_valid_pdf([0.2, 0.3, 0.6], tolerance=0.2))
        with self.assertRaises(ValueError):
            is_valid_pdf([1.0], tolerance=0.0)

    def test_check_status(self) -> None:
        self.assertEqual(check_status(0), ExplorationStatus.OK)
        with self.assertRaises(ExplorationError) as ctx:
            check_status(ExplorationStatus.EMPTY_DISTRIBUTION, operation="softmax")
        self.assertEqual(ctx.exception.status, ExplorationStatus.EMPTY_DISTRIBUTION)
        self.assertEqual(ctx.exception.operation, "softmax")
        self.assertIn("empty_distribution", str(ctx.exception))
        self.assertIsInstance(ctx.exception, ValueError)

    def test_status_codes(self) -> None:
        self.assertEqual(int(ExplorationStatus.OK), 0)
        self.assertEqual(int(ExplorationStatus.BAD_RANGE), 1)
        self.assertEqual(int(ExplorationStatus.EMPTY_DISTRIBUTION), 2)


class BufferTypeTests(unittest.TestCase):
    def test_numpy_float32_buffer_is_mutated_in_place(self) -> None:
        pdf = np.zeros(3, dtype=np.float32)
        self.assertEqual(generate_softmax(1.0, np.array([1.0, 2.0, 3.0]), pdf), ExplorationStatus.OK)
        np.testing.assert_allclose(pdf, [0.0900, 0.2447, 0.6652], atol=1e-4)

        self.assertEqual(enforce_minimum_probability(0.6, True, pdf), ExplorationStatus.OK)
        self.assertAlmostEqual(float(pdf.sum()), 1.0, places=5)
        self.assertGreaterEqual(float(pdf[0]), 0.2 - 1e-6)

    def test_numpy_vote_counts(self) -> None:
        pdf = np.zeros(3)
        self.assertEqual(generate_bag(np.array([2, 0, 6]), pdf), ExplorationStatus.OK)
        np.testing.assert_allclose(pdf, [0.25, 0.0, 0.75])

    def test_array_module_buffer(self) -> None:
        pdf = array("d", [0.0, 0.0, 0.0])
        self.assertEqual(generate_epsilon_greedy(0.3, 2, pdf), ExplorationStatus.OK)
        self.assertAlmostEqual(pdf[2], 0.8)
        self.assertAlmostEqual(sum(pdf), 1.0)


if __name__ == "__main__":
    unittest.main()
