import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from diabetic_retinopathy import (
    GENERAL_RECOMMENDATIONS,
    MACULAR_EDEMA_RECOMMENDATION,
    annual_risk,
    calculate_diabetic_retinopathy_risk,
    risk_level_for_score,
    stage_diabetic_retinopathy,
)
from models import DiabeticRiskInput, RetinopathyLesionInput


def _risk_input(**overrides):
    data = dict(duration_years=3, hba1c=6.5, systolic_bp=120, diastolic_bp=80, cholesterol=180)
    data.update(overrides)
    return DiabeticRiskInput(**data)


class DiabeticRiskTests(unittest.TestCase):
    def test_well_controlled_patient_is_low_risk(self):
        result = calculate_diabetic_retinopathy_risk(_risk_input())
        # duration 1 + HbA1c 1 + mean BP 93.3 -> 2 + cholesterol 1
        self.assertEqual(result.risk_score, 5)
        self.assertEqual(result.risk_level, "low")
        self.assertEqual(result.annual_risk, 4.5)
        self.assertEqual(result.screening_interval, 24)
        self.assertEqual(result.mean_bp, 93.3)
        self.assertEqual(len(result.recommendations), 5)
        self.assertEqual(result.recommendations[-3:], GENERAL_RECOMMENDATIONS)

    def test_defaults_are_type_2_and_age_50(self):
        inp = _risk_input()
        self.assertEqual(inp.diabetes_type, 2)
        self.assertEqual(inp.age, 50)

    def test_worst_case_is_very_high(self):
        result = calculate_diabetic_retinopathy_risk(
            _risk_input(
                duration_years=25,
                hba1c=11,
                systolic_bp=180,
                diastolic_bp=110,
                cholesterol=260,
                smoking=True,
                diabetes_type=1,
                age=70,
            )
        )
        self.assertEqual(result.risk_score, 36)
        self.assertEqual(result.risk_level, "very_high")
        self.assertEqual(result.annual_risk, 80.0)
        self.assertEqual(result.screening_interval, 3)
        # HbA1c, BP, smoking, level, then the three general recommendations
        self.assertEqual(len(result.recommendations), 7)
        self.assertEqual(len(result.score_items), 7)

    def test_hba1c_is_monotonic(self):
        previous = None
        for tenths in range(65, 106, 5):
            hba1c = tenths / 10
            score = calculate_diabetic_retinopathy_risk(_risk_input(hba1c=hba1c)).risk_score
            if previous is not None:
                self.assertGreaterEqual(score, previous, msg=f"score dropped at HbA1c {hba1c}")
            previous = score

    def test_each_flat_factor_adds_points(self):
        base = calculate_diabetic_retinopathy_risk(_risk_input()).risk_score
        self.assertEqual(calculate_diabetic_retinopathy_risk(_risk_input(smoking=True)).risk_score, base + 3)
        self.assertEqual(calculate_diabetic_retinopathy_risk(_risk_input(diabetes_type=1)).risk_score, base + 2)
        self.assertEqual(calculate_diabetic_retinopathy_risk(_risk_input(age=66)).risk_score, base + 1)
        self.assertEqual(calculate_diabetic_retinopathy_risk(_risk_input(age=65)).risk_score, base)

    def test_each_hba1c_band_has_distinct_recommendation(self):
        first_recs = {
            calculate_diabetic_retinopathy_risk(_risk_input(hba1c=h)).recommendations[0]
            for h in (6.0, 7.5, 8.5, 9.5, 12.0)
        }
        self.assertEqual(len(first_recs), 5)

    def test_upper_bp_bands_add_recommendation(self):
        normal = calculate_diabetic_retinopathy_risk(_risk_input(systolic_bp=120, diastolic_bp=80))
        raised = calculate_diabetic_retinopathy_risk(_risk_input(systolic_bp=130, diastolic_bp=85))
        self.assertEqual(len(raised.recommendations), len(normal.recommendations) + 1)
        self.assertEqual(raised.risk_score, normal.risk_score + 2)

    def test_annual_risk_continuous_at_band_boundaries(self):
        for boundary in (8, 15):
            with self.subTest(boundary=boundary):
                self.assertLess(abs(annual_risk(boundary) - annual_risk(boundary - 1e-9)), 1.0)
                self.assertLess(abs(annual_risk(boundary + 1e-9) - annual_risk(boundary)), 1.0)

    def test_annual_risk_caps_at_85(self):
        self.assertEqual(annual_risk(40), 85)
        self.assertEqual(annual_risk(100), 85)

    def test_risk_level_bands(self):
        cases = [(0, "low"), (8, "low"), (8.5, "moderate"), (15, "moderate"), (16, "high"), (22, "high"), (23, "very_high")]
        for score, level in cases:
            with self.subTest(score=score):
                self.assertEqual(risk_level_for_score(score), level)


class RetinopathyStagingTests(unittest.TestCase):
    def test_no_lesions(self):
        result = stage_diabetic_retinopathy(RetinopathyLesionInput())
        self.assertEqual(result.stage, "none")
        self.assertEqual(result.risk_score, 0)
        self.assertEqual(result.follow_up_interval, 12)

    def test_stage_progression(self):
        cases = [
            (dict(microaneurysms=5), "mild", 12),
            (dict(microaneurysms=10, hemorrhages=5), "moderate", 6),
            (dict(venous_beading=True, irma=True), "moderate", 6),
            (dict(venous_beading=True, irma=True, cotton_wool_spots=10), "severe", 3),
            (dict(neovascularization=True), "severe", 3),
            (dict(neovascularization=True, irma=True, venous_beading=True), "proliferative", 1),
        ]
        for lesions, stage, follow_up in cases:
            with self.subTest(lesions=lesions):
                result = stage_diabetic_retinopathy(RetinopathyLesionInput(**lesions))
                self.assertEqual(result.stage, stage)
                self.assertEqual(result.follow_up_interval, follow_up)

    def test_weighted_sum(self):
        result = stage_diabetic_retinopathy(
            RetinopathyLesionInput(microaneurysms=4, hemorrhages=3, hard_exudates=2, cotton_wool_spots=1)
        )
        self.assertAlmostEqual(result.risk_score, 0.4 + 0.6 + 0.3 + 0.3)
        self.assertEqual(result.stage, "mild")

    def test_macular_edema_forces_monthly_follow_up(self):
        result = stage_diabetic_retinopathy(RetinopathyLesionInput(microaneurysms=5, macular_edema=True))
        self.assertEqual(result.stage, "mild")
        self.assertTrue(result.macular_edema)
        self.assertEqual(result.follow_up_interval, 1)
        self.assertEqual(result.recommendations[-1], MACULAR_EDEMA_RECOMMENDATION)


if __name__ == "__main__":
    unittest.main()
