"""College, scholarship and employer scoring with tunable policy constants."""

from college_match.rank.college_scoring import score_college_for_student, select_college_list
from college_match.rank.employer_matching import match_employers
from college_match.rank.policy import PolicyBundle, load_policy_bundle
from college_match.rank.scholarship_matching import match_scholarships, score_scholarship

__all__ = [
    "PolicyBundle",
    "load_policy_bundle",
    "match_employers",
    "match_scholarships",
    "score_college_for_student",
    "score_scholarship",
    "select_college_list",
]
