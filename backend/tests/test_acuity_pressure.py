import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from iop import assess_iop
from models import IOPInput, VisualAcuityInput
from scoring import InvalidMeasurementError
from visual_acuity import calculate_visual_acuity


class VisualAcuityTests(unittest.TestCase):
    def test_20_20_is_normal(self):
        result = calculate_visual_acuity(VisualAcuityInput(denominator=20))
        self.assertEqual(result.decimal, 1.0)
        self.assertEqual(result.log_mar, 0.0)
        self.assertEqual(result.category, "normal")
        self.assertEqual(result.snellen, "20/20")

    def test_category_bands(self):
        cases = [
            (15, "normal"),
            (25, "normal"),
            (40, "mild_impairment"),
            (50, "mild_impairment"),
            (70, "moderate_impairment"),
            (100, "moderate_impairment"),
            (200, "moderate_impairment"),
            (400, "severe_impairment"),
            (500, "blindness"),
        ]
        for denominator, category in cases:
            with self.subTest(denominator=denominator):
                result = calculate_visual_acuity(VisualAcuityInput(denominator=denominator))
                self.assertEqual(result.category, category)

    def test_snellen_string_tracks_denominator(self):
        for denominator in (15, 20, 25, 30, 40, 50, 70, 100, 200):
            with self.subTest(denominator=denominator):
                result = calculate_visual_acuity(VisualAcuityInput(denominator=denominator))
                self.assertEqual(result.snellen, f"20/{denominator}")

    def test_log_mar_of_20_200(self):
        result = calculate_visual_acuity(VisualAcuityInput(denominator=200))
        self.assertAlmostEqual(result.log_mar, 1.0, places=9)
        self.assertAlmostEqual(result.decimal, 0.1, places=9)

    def test_zero_denominator_raises(self):
        with self.assertRaises(InvalidMeasurementError):
            calculate_visual_acuity(VisualAcuityInput(denominator=0))

    def test_negative_denominator_is_a_value_error(self):
        with self.assertRaises(ValueError):
            calculate_visual_acuity(VisualAcuityInput(denominator=-40))

    def test_zero_test_distance_raises(self):
        with self.assertRaises(InvalidMeasurementError):
            calculate_visual_acuity(VisualAcuityInput(denominator=20, test_distance=0))

    def test_non_finite_values_raise(self):
        for denominator, distance in ((float("nan"), 20), (float("inf"), 20), (20, float("inf"))):
            with self.subTest(denominator=denominator, distance=distance):
                with self.assertRaises(InvalidMeasurementError):
                    calculate_visual_acuity(VisualAcuityInput(denominator=denominator, test_distance=distance))

    def test_metric_notation(self):
        result = calculate_visual_acuity(VisualAcuityInput(denominator=12, test_distance=6))
        self.assertEqual(result.snellen, "6/12")
        self.assertAlmostEqual(result.decimal, 0.5)
        self.assertEqual(result.category, "mild_impairment")


class IOPTests(unittest.TestCase):
    def test_reference_case_is_low(self):
        result = assess_iop(IOPInput(pressure=16, age=40, corneal_thickness=550))
        self.assertEqual(result.corrected_pressure, 16.0)
        self.assertEqual(result.age_adjusted_normal, 16.0)
        self.assertEqual(result.risk, "low")

    def test_corneal_thickness_defaults_to_550(self):
        self.assertEqual(IOPInput(pressure=16, age=40).corneal_thickness, 550.0)
        result = assess_iop(IOPInput(pressure=18, age=40))
        self.assertEqual(result.corrected_pressure, 18.0)

    def test_correction_is_linear_in_thickness(self):
        base = assess_iop(IOPInput(pressure=20, age=50, corneal_thickness=550))
        thick = assess_iop(IOPInput(pressure=20, age=50, corneal_thickness=650))
        thin = assess_iop(IOPInput(pressure=20, age=50, corneal_thickness=450))
        self.assertAlmostEqual(thick.corrected_pressure - base.corrected_pressure, 0.7, places=9)
        self.assertAlmostEqual(base.corrected_pressure - thin.corrected_pressure, 0.7, places=9)

    def test_risk_bands_relative_to_age_adjusted_normal(self):
        cases = [(21, "moderate"), (21.5, "high"), (26, "high"), (26.5, "very_high")]
        for pressure, risk in cases:
            with self.subTest(pressure=pressure):
                result = assess_iop(IOPInput(pressure=pressure, age=40))
                self.assertEqual(result.risk, risk)

    def test_older_patients_have_higher_normal(self):
        result = assess_iop(IOPInput(pressure=20, age=80))
        self.assertAlmostEqual(result.age_adjusted_normal, 20.0)
        self.assertEqual(result.risk, "low")

    def test_each_band_has_its_own_recommendation(self):
        recs = {
            assess_iop(IOPInput(pressure=p, age=40)).recommendation
            for p in (10, 19, 24, 40)
        }
        self.assertEqual(len(recs), 4)

    def test_negative_pressure_is_not_rejected(self):
        result = assess_iop(IOPInput(pressure=-5, age=40))
        self.assertEqual(result.risk, "low")


if __name__ == "__main__":
    unittest.main()
