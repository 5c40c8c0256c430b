"""
Built-in catalog content: the "CRP in Action" framework with its ten
integrated look-fors, and the alignment labels questions can carry.
"""

CRP_IN_ACTION_ID = "crp-in-action"
INTEGRATED_LOOKFORS_SECTION_ID = "integrated-lookfors"


def _lookfor(n: int, text: str, tags: list[str], help_text: str, alignments: list[str]) -> dict:
    return {
        "id": f"lookfor{n}",
        "text": text,
        "type": "rating",
        "required": True,
        "scale": 4,
        "weight": 10,
        "tags": tags,
        "help_text": help_text,
        "framework_alignments": alignments,
    }


CRP_IN_ACTION = {
    "id": CRP_IN_ACTION_ID,
    "name": "CRP in Action: Integrated Observation Tool",
    "description": "Comprehensive evaluation framework integrating Culturally Responsive Practices",
    "version": "1.0",
    "status": "active",
    "last_modified": "2025-08-25",
    "tags": ["crp", "culturally-responsive", "assessment"],
    "sections": [
        {
            "id": INTEGRATED_LOOKFORS_SECTION_ID,
            "title": "10 Look-Fors: Integrated Observation",
            "description": "Evidence-based look-fors aligned to multiple frameworks",
            "weight": 100,
            "questions": [
                _lookfor(
                    1,
                    "The learning target is clearly communicated, standards-based, and relevant to students. "
                    "Students can explain what they are learning and why.",
                    ["learning-targets", "clarity", "standards"],
                    "Look for visible learning targets and student understanding of purpose",
                    ["5-daily-assessment", "crp-curriculum", "tripod-clarify"],
                ),
                _lookfor(
                    2,
                    "Teacher fosters a respectful, inclusive, and identity-affirming environment where all "
                    "students feel a sense of belonging.",
                    ["belonging", "inclusive", "identity-affirming"],
                    "Observe inclusive language, cultural affirmation, and belonging practices",
                    ["crp-general", "casel-social-awareness", "panorama", "tripod-care"],
                ),
                _lookfor(
                    3,
                    "Teacher checks for understanding and adjusts instruction in response to student needs.",
                    ["formative-assessment", "responsive-teaching", "differentiation"],
                    "Look for checks for understanding and instructional adjustments",
                    ["5-daily-assessment", "tripod-clarify", "inclusive-practices"],
                ),
                _lookfor(
                    4,
                    "Teacher uses questioning strategies that increase cognitive demand and promote student thinking.",
                    ["questioning", "cognitive-demand", "critical-thinking"],
                    "Observe higher-order questions and student thinking promotion",
                    ["5-daily-assessment", "crp-high-expectations", "tripod-challenge"],
                ),
                _lookfor(
                    5,
                    "Students are engaged in meaningful, collaborative learning experiences with clear roles "
                    "and expectations.",
                    ["engagement", "collaboration", "student-roles"],
                    "Look for purposeful collaboration with defined student roles",
                    ["crp-general", "casel-relationship-skills", "tripod-captivate", "inclusive-practices"],
                ),
                _lookfor(
                    6,
                    "Teacher demonstrates cultural competence and integrates students' backgrounds and "
                    "experiences into the lesson.",
                    ["cultural-competence", "student-backgrounds", "culturally-responsive"],
                    "Observe integration of student cultures and experiences into instruction",
                    ["crp-learning-partnerships", "panorama", "casel-social-awareness", "tripod-confer"],
                ),
                _lookfor(
                    7,
                    "Teacher actively monitors and supports students during group and independent work.",
                    ["monitoring", "support", "independent-work"],
                    "Look for active circulation and targeted student support",
                    ["5-daily-assessment", "tripod-control", "inclusive-practices"],
                ),
                _lookfor(
                    8,
                    "Students have opportunities to reflect on and consolidate their learning during and "
                    "after the lesson.",
                    ["reflection", "consolidation", "metacognition"],
                    "Observe student reflection and learning consolidation opportunities",
                    ["5-daily-assessment", "casel-self-management", "tripod-consolidate"],
                ),
                _lookfor(
                    9,
                    "Teacher builds strong, trusting relationships with students through affirming interactions.",
                    ["relationships", "trust", "affirming-interactions"],
                    "Look for positive, affirming teacher-student interactions",
                    ["panorama", "crp-general", "casel-relationship-skills", "tripod-care"],
                ),
                _lookfor(
                    10,
                    "Instruction is differentiated and scaffolds support access for diverse learning needs.",
                    ["differentiation", "scaffolding", "diverse-learners"],
                    "Observe differentiated instruction and scaffolding for all learners",
                    ["inclusive-practices", "crp-general", "casel-equity-access", "tripod-clarify"],
                ),
            ],
        }
    ],
}

DEFAULT_FRAMEWORKS = [CRP_IN_ACTION]

ALIGNMENT_OPTIONS = [
    {"id": "crp-general", "label": "CRP (General)", "category": "Culturally Responsive", "color": "green"},
    {"id": "crp-curriculum", "label": "CRP (Curriculum Relevance)", "category": "Culturally Responsive", "color": "green"},
    {"id": "crp-high-expectations", "label": "CRP (High Expectations)", "category": "Culturally Responsive", "color": "green"},
    {"id": "crp-learning-partnerships", "label": "CRP (Learning Partnerships)", "category": "Culturally Responsive", "color": "green"},
    {"id": "casel-social-awareness", "label": "CASEL (Social Awareness)", "category": "Social-Emotional", "color": "pink"},
    {"id": "casel-relationship-skills", "label": "CASEL (Relationship Skills)", "category": "Social-Emotional", "color": "pink"},
    {"id": "casel-self-management", "label": "CASEL (Self-Management)", "category": "Social-Emotional", "color": "pink"},
    {"id": "casel-equity-access", "label": "CASEL (Equity & Access)", "category": "Social-Emotional", "color": "pink"},
    {"id": "tripod-care", "label": "Tripod: Care", "category": "7Cs of Learning", "color": "blue"},
    {"id": "tripod-clarify", "label": "Tripod: Clarify", "category": "7Cs of Learning", "color": "blue"},
    {"id": "tripod-challenge", "label": "Tripod: Challenge", "category": "7Cs of Learning", "color": "blue"},
    {"id": "tripod-captivate", "label": "Tripod: Captivate", "category": "7Cs of Learning", "color": "blue"},
    {"id": "tripod-confer", "label": "Tripod: Confer", "category": "7Cs of Learning", "color": "blue"},
    {"id": "tripod-consolidate", "label": "Tripod: Consolidate", "category": "7Cs of Learning", "color": "blue"},
    {"id": "tripod-control", "label": "Tripod: Control", "category": "7Cs of Learning", "color": "blue"},
    {"id": "5-daily-assessment", "label": "5 Daily Assessment Practices", "category": "Assessment", "color": "yellow"},
    {"id": "panorama", "label": "Panorama (Student Experience)", "category": "Student Experience", "color": "purple"},
    {"id": "inclusive-practices", "label": "Inclusive Practices", "category": "Inclusion & Equity", "color": "indigo"},
]
