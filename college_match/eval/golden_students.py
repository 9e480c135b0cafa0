from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from college_match.normalize.schema import (
    College,
    Employer,
    IncomeBracket,
    Ownership,
    RecruitingPref,
    Scholarship,
    StudentProfile,
)

EVAL_TODAY = date(2026, 11, 2)


@dataclass(frozen=True, slots=True)
class GoldenStudent:
    student_id: str
    description: str
    profile: StudentProfile


def get_golden_students() -> list[GoldenStudent]:
    return [
        GoldenStudent(
            student_id="golden_fl_cs_low_income_first_gen",
            description="Florida senior, first-generation, lowest income bracket, computer science.",
            profile=StudentProfile(
                student_id="golden_fl_cs_low_income_first_gen",
                gpa=3.6,
                grade_level=12,
                state_of_residence="FL",
                income_bracket=IncomeBracket.B0_30K,
                is_first_gen=True,
                intended_major="Computer Science",
            ),
        ),
        GoldenStudent(
            student_id="golden_tx_nursing_mid_income",
            description="Texas senior in the middle bracket who wants to study nursing in state.",
            profile=StudentProfile(
                student_id="golden_tx_nursing_mid_income",
                gpa=3.2,
                grade_level=12,
                state_of_residence="TX",
                income_bracket=IncomeBracket.B48_75K,
                intended_major="Nursing",
                location_preference="in_state",
            ),
        ),
        GoldenStudent(
            student_id="golden_ca_business_high_income",
            description="California junior from the top bracket, business major, prefers private colleges.",
            profile=StudentProfile(
                student_id="golden_ca_business_high_income",
                gpa=3.9,
                grade_level=11,
                state_of_residence="CA",
                income_bracket=IncomeBracket.B110K_PLUS,
                intended_major="Business Administration",
                college_type_preference="private",
            ),
        ),
        GoldenStudent(
            student_id="golden_ny_undeclared_no_gpa",
            description="New York senior with no GPA on file and no intended major.",
            profile=StudentProfile(
                student_id="golden_ny_undeclared_no_gpa",
                grade_level=12,
                state_of_residence="NY",
                income_bracket=IncomeBracket.B30_48K,
                is_first_gen=True,
            ),
        ),
    ]


def _college(
    college_id: str,
    name: str,
    state: str,
    ownership: Ownership,
    admission_rate: float | None,
    net_prices: tuple[float | None, float | None, float | None, float | None, float | None],
    completion_rate: float | None,
    median_earnings: int | None,
    cost_of_attendance: float | None,
    city: str | None = None,
) -> College:
    return College(
        college_id=college_id,
        name=name,
        ownership=ownership,
        city=city,
        state=state,
        admission_rate=admission_rate,
        net_price_0_30k=net_prices[0],
        net_price_30_48k=net_prices[1],
        net_price_48_75k=net_prices[2],
        net_price_75_110k=net_prices[3],
        net_price_110k_plus=net_prices[4],
        completion_rate=completion_rate,
        median_earnings_10yr=median_earnings,
        cost_of_attendance=cost_of_attendance,
    )


def get_sample_colleges() -> list[College]:
    public = Ownership.PUBLIC
    private = Ownership.PRIVATE_NONPROFIT
    return [
        _college("100001", "Gulf Coast State University", "FL", public, 0.41,
                 (6_500, 8_200, 12_400, 17_900, 21_300), 0.71, 52_000, 24_500, "Tampa"),
        _college("100002", "Central Florida Technical University", "FL", public, 0.62,
                 (9_100, 10_300, 13_800, 18_100, 22_000), 0.64, 48_500, 23_800, "Orlando"),
        _college("100003", "Atlantic Coast College", "FL", private, 0.18,
                 (7_200, 9_800, 16_500, 27_400, 48_900), 0.92, 81_000, 78_400, "Miami"),
        _college("100004", "Panhandle Community University", "FL", public, 0.95,
                 (4_100, 5_300, 7_900, 11_200, 13_600), 0.38, 36_500, 16_200, "Pensacola"),
        _college("200001", "Lone Star State University", "TX", public, 0.55,
                 (8_800, 10_900, 14_200, 19_600, 23_100), 0.67, 55_000, 26_300, "Austin"),
        _college("200002", "Hill Country Nursing College", "TX", private, 0.72,
                 (12_400, 14_100, 18_700, 24_900, 31_500), 0.58, 61_000, 42_100, "San Antonio"),
        _college("200003", "Permian Basin University", "TX", public, 0.88,
                 (5_900, 7_400, 10_100, 13_900, 16_800), 0.45, 44_000, 20_400, "Odessa"),
        _college("200004", "Gulf Institute of Technology", "TX", private, 0.09,
                 (3_900, 5_100, 9_800, 19_500, 52_300), 0.95, 98_000, 82_600, "Houston"),
        _college("300001", "Pacific Crest University", "CA", private, 0.22,
                 (9_900, 12_600, 18_400, 29_800, 54_100), 0.89, 79_000, 84_300, "Los Angeles"),
        _college("300002", "Sierra Valley College", "CA", private, 0.67,
                 (14_800, 17_300, 22_600, 31_400, 44_200), 0.74, 58_000, 61_900, "Sacramento"),
        _college("300003", "Bayview State University", "CA", public, 0.33,
                 (5_400, 6_900, 12_300, 21_500, 29_700), 0.83, 72_000, 38_900, "Oakland"),
        _college("400001", "Hudson Liberal Arts College", "NY", private, 0.36,
                 (None, None, None, None, None), None, None, 79_800, "Albany"),
        _college("400002", "Empire City University", "NY", public, None,
                 (6_300, 7_700, 11_900, 16_800, 19_900), 0.61, 50_500, 27_400, "Buffalo"),
    ]


def get_sample_scholarships() -> list[Scholarship]:
    return [
        Scholarship(
            scholarship_id="sch-first-gen-national",
            name="First Generation Futures Award",
            amount=5_000,
            min_gpa=3.0,
            requires_first_gen=True,
            deadline_month=3,
            deadline_day=1,
        ),
        Scholarship(
            scholarship_id="sch-fl-stem",
            name="Florida STEM Scholars Grant",
            amount_max=10_000,
            min_gpa=3.3,
            eligible_states=("FL",),
            eligible_majors=("computer science", "engineering", "mathematics"),
            requires_essay=True,
            deadline_month=2,
            deadline_day=15,
        ),
        Scholarship(
            scholarship_id="sch-tx-health",
            name="Texas Future Nurses Fund",
            amount=2_500,
            eligible_states=("TX",),
            eligible_majors=("nursing", "health science"),
            deadline_month=4,
            deadline_day=30,
        ),
        Scholarship(
            scholarship_id="sch-no-essay",
            name="Quick Apply No Essay Scholarship",
            amount=1_000,
            deadline_month=11,
            deadline_day=30,
        ),
        Scholarship(
            scholarship_id="sch-low-income",
            name="Open Doors Need-Based Award",
            amount_min=1_000,
            amount_max=4_000,
            min_gpa=2.5,
            demographic_tags=("low_income", "first_gen"),
            requires_essay=True,
            deadline_month=1,
            deadline_day=15,
        ),
        Scholarship(
            scholarship_id="sch-business-leaders",
            name="Future Business Leaders Scholarship",
            amount=3_000,
            min_gpa=3.5,
            eligible_majors=("business", "finance", "accounting"),
            requires_essay=True,
            deadline_month=2,
            deadline_day=29,
        ),
        Scholarship(
            scholarship_id="sch-ca-only",
            name="Golden State Merit Award",
            amount=6_000,
            min_gpa=3.7,
            eligible_states=("CA",),
            requires_essay=True,
            deadline_month=3,
            deadline_day=2,
        ),
        Scholarship(
            scholarship_id="sch-retired",
            name="Retired Community Award",
            amount=500,
            is_active=False,
        ),
    ]


def get_sample_employers() -> list[Employer]:
    return [
        Employer(
            employer_id="emp-coastal-health",
            name="Coastal Health Partners",
            industry="Healthcare",
            recruiting_prefs=(
                RecruitingPref(college_tiers=("match", "likely"), major_keywords=("nursing", "health")),
            ),
        ),
        Employer(
            employer_id="emp-bright-code",
            name="BrightCode Labs",
            industry="Software",
            recruiting_prefs=(
                RecruitingPref(college_tiers=("reach", "match"), major_keywords=("computer", "data")),
            ),
        ),
        Employer(
            employer_id="emp-civic-works",
            name="Civic Works Cooperative",
            industry="Public Service",
            recruiting_prefs=(RecruitingPref(college_tiers=("reach", "match", "likely")),),
        ),
        Employer(
            employer_id="emp-paused",
            name="Paused Recruiting Co",
            industry="Retail",
            recruiting_prefs=(
                RecruitingPref(college_tiers=("reach", "match", "likely"), is_active=False),
            ),
        ),
    ]
