"""
Built-in diagnostics and roadmap templates.

Templates carry explicit tier and domain tags; step `skills` name the
diagnostic skill tags that let a learner skip ahead.
"""

from __future__ import annotations

from typing import Any

from .models import DiagnosticDefinition, RoadmapTemplate, parse_diagnostic

_DIAGNOSTICS: list[dict[str, Any]] = [
    {
        "id": "pre_test_programming",
        "domain": "programming",
        "title": "Programming Fundamentals Assessment",
        "description": "Evaluate your programming knowledge across languages and concepts",
        "time_limit_minutes": 20,
        "questions": [
            {
                "id": "prog_1",
                "question": "Which of these is NOT a programming paradigm?",
                "options": [
                    "Object-Oriented Programming",
                    "Functional Programming",
                    "Database Programming",
                    "Procedural Programming",
                ],
                "correct_index": 2,
                "skill": "programming_concepts",
                "difficulty": "beginner",
            },
            {
                "id": "prog_2",
                "question": "What does API stand for?",
                "options": [
                    "Application Programming Interface",
                    "Advanced Programming Implementation",
                    "Automated Program Integration",
                    "Application Process Integration",
                ],
                "correct_index": 0,
                "skill": "web_development",
                "difficulty": "beginner",
            },
            {
                "id": "prog_3",
                "question": 'In JavaScript, what is the difference between "==" and "==="?',
                "options": [
                    "No difference",
                    "== checks type, === checks value",
                    "=== checks both type and value, == only checks value",
                    "== is deprecated",
                ],
                "correct_index": 2,
                "skill": "javascript",
                "difficulty": "intermediate",
            },
            {
                "id": "prog_4",
                "question": "What is the time complexity of binary search?",
                "options": ["O(n)", "O(log n)", "O(n^2)", "O(1)"],
                "correct_index": 1,
                "skill": "algorithms",
                "difficulty": "intermediate",
            },
            {
                "id": "prog_5",
                "question": "Which design pattern ensures a class has only one instance?",
                "options": ["Factory Pattern", "Observer Pattern", "Singleton Pattern", "Strategy Pattern"],
                "correct_index": 2,
                "skill": "design_patterns",
                "difficulty": "advanced",
            },
        ],
    },
    {
        "id": "pre_test_design",
        "domain": "design",
        "title": "Design & UX Assessment",
        "description": "Assess your design thinking and user experience knowledge",
        "time_limit_minutes": 15,
        "questions": [
            {
                "id": "design_1",
                "question": "What does UX stand for?",
                "options": ["User Experience", "User Extension", "Universal Experience", "User Explanation"],
                "correct_index": 0,
                "skill": "ux_basics",
                "difficulty": "beginner",
            },
            {
                "id": "design_2",
                "question": "Which color scheme uses colors opposite on the color wheel?",
                "options": ["Monochromatic", "Analogous", "Complementary", "Triadic"],
                "correct_index": 2,
                "skill": "color_theory",
                "difficulty": "beginner",
            },
            {
                "id": "design_3",
                "question": "What is the primary goal of user research?",
                "options": [
                    "To validate design decisions",
                    "To understand user needs and behaviors",
                    "To test visual designs",
                    "To reduce development costs",
                ],
                "correct_index": 1,
                "skill": "user_research",
                "difficulty": "intermediate",
            },
            {
                "id": "design_4",
                "question": "Which principle emphasizes the most important element in a design?",
                "options": ["Balance", "Contrast", "Hierarchy", "Proximity"],
                "correct_index": 2,
                "skill": "design_principles",
                "difficulty": "intermediate",
            },
        ],
    },
    {
        "id": "pre_test_business",
        "domain": "business",
        "title": "Business & Marketing Assessment",
        "description": "Evaluate your business acumen and marketing knowledge",
        "time_limit_minutes": 15,
        "questions": [
            {
                "id": "biz_1",
                "question": "What does ROI stand for?",
                "options": ["Return on Investment", "Rate of Interest", "Revenue over Income", "Risk of Investment"],
                "correct_index": 0,
                "skill": "business_basics",
                "difficulty": "beginner",
            },
            {
                "id": "biz_2",
                "question": "Which marketing funnel stage focuses on awareness?",
                "options": ["Bottom of funnel", "Middle of funnel", "Top of funnel", "End of funnel"],
                "correct_index": 2,
                "skill": "marketing_funnel",
                "difficulty": "beginner",
            },
            {
                "id": "biz_3",
                "question": "What is A/B testing primarily used for?",
                "options": [
                    "Testing server performance",
                    "Comparing two versions to see which performs better",
                    "Testing API endpoints",
                    "Database optimization",
                ],
                "correct_index": 1,
                "skill": "marketing_analytics",
                "difficulty": "intermediate",
            },
        ],
    },
]


def _steps(key: str, rows: list[tuple[str, str, list[str], int, int]]) -> list[dict[str, Any]]:
    return [
        {
            "id": f"{key}-{i}",
            "title": title,
            "summary": summary,
            "skills": skills,
            "xp_reward": xp,
            "estimated_hours": hours,
        }
        for i, (title, summary, skills, xp, hours) in enumerate(rows, start=1)
    ]


_TEMPLATES: list[dict[str, Any]] = [
    # Programming
    {
        "key": "web_development",
        "title": "Web Development for Beginners",
        "description": "Start your web development journey with HTML, CSS, and JavaScript",
        "tier": "beginner",
        "domains": ["programming"],
        "estimated_weeks": 12,
        "steps": _steps("web_development", [
            ("HTML Fundamentals", "Learn the structure of web pages", ["web_development"], 100, 3),
            ("CSS Styling", "Make your websites beautiful with CSS", ["web_development"], 125, 3),
            ("JavaScript Basics", "Add interactivity to your websites", ["javascript"], 150, 4),
            ("Programming Concepts", "Paradigms, functions and data structures", ["programming_concepts"], 125, 3),
        ]),
    },
    {
        "key": "mobile_development",
        "title": "Mobile App Development Basics",
        "description": "Learn to build mobile apps with React Native",
        "tier": "beginner",
        "domains": ["programming"],
        "estimated_weeks": 10,
        "steps": _steps("mobile_development", [
            ("Mobile Development Concepts", "Understand mobile app architecture", ["programming_concepts"], 100, 2),
            ("React Native Setup", "Set up your development environment", [], 75, 1),
            ("Components and Navigation", "Build screens and move between them", ["javascript"], 125, 3),
        ]),
    },
    {
        "key": "full_stack",
        "title": "Full Stack Development",
        "description": "Build complete web applications from frontend to backend",
        "tier": "intermediate",
        "domains": ["programming"],
        "estimated_weeks": 16,
        "steps": _steps("full_stack", [
            ("Advanced React", "Master React hooks, context, and state management", ["javascript"], 200, 5),
            ("Node.js Backend", "Build robust server-side applications", ["javascript", "web_development"], 250, 6),
            ("Algorithms for the Web", "Efficient data handling on client and server", ["algorithms"], 200, 4),
        ]),
    },
    {
        "key": "system_design",
        "title": "System Design & Architecture",
        "description": "Learn to design scalable, distributed systems",
        "tier": "advanced",
        "domains": ["programming"],
        "estimated_weeks": 20,
        "steps": _steps("system_design", [
            ("Scalability Patterns", "Design patterns for large-scale systems", ["design_patterns"], 300, 6),
            ("Distributed Data", "Replication, partitioning and consistency", ["algorithms"], 300, 6),
        ]),
    },
    # Design
    {
        "key": "ui_design_foundations",
        "title": "UI Design Foundations",
        "description": "Color, typography and layout for interfaces",
        "tier": "beginner",
        "domains": ["design"],
        "estimated_weeks": 8,
        "steps": _steps("ui_design_foundations", [
            ("What Is UX", "Users, goals and experience", ["ux_basics"], 100, 2),
            ("Color Theory", "Schemes, contrast and mood", ["color_theory"], 100, 2),
            ("Layout and Hierarchy", "Guide the eye to what matters", ["design_principles"], 125, 3),
        ]),
    },
    {
        "key": "ux_design_practice",
        "title": "UX Design in Practice",
        "description": "Research-driven interface design",
        "tier": "intermediate",
        "domains": ["design"],
        "estimated_weeks": 12,
        "steps": _steps("ux_design_practice", [
            ("User Research Methods", "Interviews, surveys and usability tests", ["user_research"], 200, 4),
            ("Design Principles Applied", "Hierarchy, balance and proximity in real screens", ["design_principles"], 200, 4),
            ("Prototyping", "From wireframe to clickable prototype", [], 175, 4),
        ]),
    },
    {
        "key": "design_systems",
        "title": "Design Systems",
        "description": "Build and govern a scalable design language",
        "tier": "advanced",
        "domains": ["design"],
        "estimated_weeks": 14,
        "steps": _steps("design_systems", [
            ("Tokens and Components", "Systematize color, type and spacing", ["color_theory", "design_principles"], 250, 5),
            ("Research Operations", "Scale research across teams", ["user_research"], 250, 5),
        ]),
    },
    # Business
    {
        "key": "digital_marketing",
        "title": "Digital Marketing Essentials",
        "description": "Reach and convert customers online",
        "tier": "beginner",
        "domains": ["business"],
        "estimated_weeks": 8,
        "steps": _steps("digital_marketing", [
            ("Business Basics", "Revenue, cost and return on investment", ["business_basics"], 100, 2),
            ("The Marketing Funnel", "Awareness, consideration and conversion", ["marketing_funnel"], 125, 3),
            ("Measuring Campaigns", "Metrics and experiments", ["marketing_analytics"], 125, 3),
        ]),
    },
    {
        "key": "growth_marketing",
        "title": "Growth Marketing",
        "description": "Experiment-driven customer acquisition and retention",
        "tier": "intermediate",
        "domains": ["business"],
        "estimated_weeks": 12,
        "steps": _steps("growth_marketing", [
            ("Funnel Optimization", "Find and fix conversion leaks", ["marketing_funnel"], 200, 4),
            ("Experimentation", "Design and read A/B tests", ["marketing_analytics"], 200, 4),
        ]),
    },
    {
        "key": "business_strategy",
        "title": "Business Strategy & Leadership",
        "description": "Competitive strategy and SaaS metrics",
        "tier": "advanced",
        "domains": ["business"],
        "estimated_weeks": 16,
        "steps": _steps("business_strategy", [
            ("Strategic Analysis", "SWOT, positioning and moats", ["business_basics"], 250, 5),
            ("SaaS Metrics", "MRR, CAC and retention economics", ["marketing_analytics"], 250, 5),
        ]),
    },
]

BUILTIN_DIAGNOSTICS: tuple[DiagnosticDefinition, ...] = tuple(parse_diagnostic(d) for d in _DIAGNOSTICS)
ROADMAP_TEMPLATES: tuple[RoadmapTemplate, ...] = tuple(RoadmapTemplate.model_validate(t) for t in _TEMPLATES)
