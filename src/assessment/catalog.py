"""
Built-in checkpoint tests.

Definitions are declared as plain mappings and validated once at import.
`SKILL_TESTS` maps roadmap step skills and categories to the test that
gates them.
"""

from __future__ import annotations

from typing import Any

from .base import TestDefinition, parse_test

_DEFINITIONS: list[dict[str, Any]] = [
    {
        "id": "react-basics-mcq",
        "kind": "mcq",
        "title": "React Basics Knowledge Check",
        "description": "Test your understanding of React fundamentals",
        "skill": "react",
        "time_limit_minutes": 15,
        "questions": [
            {
                "id": "1",
                "question": "What is the primary purpose of React's virtual DOM?",
                "options": [
                    "To replace the real DOM entirely",
                    "To improve performance by minimizing DOM manipulations",
                    "To store component state",
                    "To handle routing in React applications",
                ],
                "correct_index": 1,
                "explanation": "The virtual DOM computes the minimum set of changes and applies them to the real DOM.",
            },
            {
                "id": "2",
                "question": "Which hook is used to manage state in functional components?",
                "options": ["useEffect", "useState", "useContext", "useCallback"],
                "correct_index": 1,
                "explanation": "useState manages local state in functional components.",
            },
            {
                "id": "3",
                "question": "What does JSX stand for?",
                "options": ["JavaScript XML", "JavaScript Extension", "Java Syntax Extension", "JavaScript Execute"],
                "correct_index": 0,
                "explanation": "JSX is JavaScript XML, HTML-like syntax inside JavaScript.",
            },
            {
                "id": "4",
                "question": "When should you use useEffect with an empty dependency array?",
                "options": [
                    "To run the effect on every render",
                    "To run the effect only once after initial render",
                    "To prevent the effect from running",
                    "To run the effect when props change",
                ],
                "correct_index": 1,
                "explanation": "An empty dependency array runs the effect once after the first render.",
            },
            {
                "id": "5",
                "question": "What is prop drilling?",
                "options": [
                    "A method to optimize React performance",
                    "Passing props through multiple nested components",
                    "A debugging technique in React",
                    "A way to create dynamic components",
                ],
                "correct_index": 1,
                "explanation": "Prop drilling passes data through several component layers; Context avoids it.",
            },
        ],
    },
    {
        "id": "javascript-algorithms-coding",
        "kind": "coding",
        "title": "JavaScript Algorithm Challenge",
        "description": "Solve coding problems to demonstrate your JavaScript skills",
        "skill": "javascript",
        "time_limit_minutes": 30,
        "problems": [
            {
                "id": "1",
                "title": "Array Sum",
                "description": "Write a function that calculates the sum of all numbers in an array.",
                "difficulty": "easy",
                "test_cases": [
                    {"input": "[1, 2, 3, 4, 5]", "expected": "15"},
                    {"input": "[-1, 0, 1]", "expected": "0"},
                    {"input": "[]", "expected": "0"},
                ],
                "template": "function arraySum(numbers) {\n  // Your code here\n}",
            },
            {
                "id": "2",
                "title": "Palindrome Check",
                "description": "Write a function that checks if a string reads the same forwards and backwards.",
                "difficulty": "medium",
                "test_cases": [
                    {"input": '"racecar"', "expected": "true"},
                    {"input": '"hello"', "expected": "false"},
                    {"input": '"A man a plan a canal Panama"', "expected": "true"},
                ],
                "template": "function isPalindrome(str) {\n  // Your code here\n}",
            },
        ],
    },
    {
        "id": "css-layout-mcq",
        "kind": "mcq",
        "title": "CSS Layout Mastery",
        "description": "Test your knowledge of CSS layout techniques",
        "skill": "css",
        "time_limit_minutes": 20,
        "questions": [
            {
                "id": "1",
                "question": "Which CSS property is used to create a flexible layout?",
                "options": ["display: block", "display: flex", "display: inline", "display: table"],
                "correct_index": 1,
                "explanation": "display: flex arranges items in rows or columns with flexible sizing.",
            },
            {
                "id": "2",
                "question": "What does 'justify-content: space-between' do in flexbox?",
                "options": [
                    "Centers all items",
                    "Puts equal space around each item",
                    "Distributes items with space between them",
                    "Aligns items to the start",
                ],
                "correct_index": 2,
                "explanation": "space-between pins the first and last items to the edges.",
            },
            {
                "id": "3",
                "question": "Which CSS Grid property defines the size of grid columns?",
                "options": ["grid-template-rows", "grid-template-columns", "grid-column-gap", "grid-auto-columns"],
                "correct_index": 1,
                "explanation": "grid-template-columns sets the number and size of columns.",
            },
        ],
    },
    {
        "id": "node-api-coding",
        "kind": "coding",
        "title": "Node.js API Development",
        "description": "Build REST API endpoints using Node.js and Express",
        "skill": "nodejs",
        "time_limit_minutes": 45,
        "problems": [
            {
                "id": "1",
                "title": "User Registration Endpoint",
                "description": "Create a POST endpoint for user registration with email and password validation",
                "difficulty": "medium",
                "test_cases": [
                    {
                        "input": '{"email": "test@example.com", "password": "SecurePass123"}',
                        "expected": "201 status with success message",
                    },
                    {
                        "input": '{"email": "invalid-email", "password": "weak"}',
                        "expected": "400 status with validation errors",
                    },
                ],
            },
        ],
    },
    {
        "id": "business-strategy-mcq",
        "kind": "mcq",
        "title": "Business Strategy Fundamentals",
        "description": "Test your understanding of key business strategy concepts",
        "skill": "business",
        "time_limit_minutes": 25,
        "questions": [
            {
                "id": "1",
                "question": "What is the primary goal of a SWOT analysis?",
                "options": [
                    "To calculate financial returns",
                    "To identify strengths, weaknesses, opportunities, and threats",
                    "To measure customer satisfaction",
                    "To plan marketing campaigns",
                ],
                "correct_index": 1,
                "explanation": "SWOT maps internal capabilities against the external environment.",
            },
            {
                "id": "2",
                "question": "What does ROI stand for in business?",
                "options": ["Return on Investment", "Rate of Interest", "Revenue on Income", "Risk of Investment"],
                "correct_index": 0,
                "explanation": "ROI compares the return of an investment to its cost.",
            },
            {
                "id": "3",
                "question": "Which metric is most important for SaaS businesses?",
                "options": [
                    "Monthly Revenue",
                    "Customer Acquisition Cost (CAC)",
                    "Monthly Recurring Revenue (MRR)",
                    "Employee Count",
                ],
                "correct_index": 2,
                "explanation": "MRR is predictable recurring revenue and tracks SaaS growth.",
            },
        ],
    },
    {
        "id": "ui-design-project",
        "kind": "project",
        "title": "UI Design Portfolio Project",
        "description": "Design a mobile app interface for a food delivery service",
        "skill": "ui-design",
        "time_limit_minutes": 60,
        "deliverables": [
            "High-fidelity mockups (PNG/JPG)",
            "Design file (Figma/Sketch/Adobe XD)",
            "Design rationale document (PDF/TXT)",
        ],
        "requirements": [
            {
                "id": "1",
                "title": "Key Screens",
                "description": "Include at least 3 key screens (Home, Menu, Checkout)",
                "points": 25,
                "category": "functionality",
            },
            {
                "id": "2",
                "title": "Visual Consistency",
                "description": "Use a consistent color scheme and typography",
                "points": 20,
                "category": "design",
            },
            {
                "id": "3",
                "title": "Visual Hierarchy",
                "description": "Clear hierarchy and composition on every screen",
                "points": 20,
                "category": "design",
            },
            {
                "id": "4",
                "title": "Design Rationale",
                "description": "A brief design rationale (200-300 words)",
                "points": 15,
                "category": "documentation",
            },
            {
                "id": "5",
                "title": "Accessibility",
                "description": "Contrast, touch target sizes and screen reader labels",
                "required": False,
                "points": 10,
                "category": "quality",
            },
            {
                "id": "6",
                "title": "Interactive Prototype",
                "description": "Clickable prototype linking the key screens",
                "required": False,
                "points": 10,
                "category": "functionality",
            },
        ],
    },
    {
        "id": "web-app-project",
        "kind": "project",
        "title": "Responsive Web Application",
        "description": "Build and submit a small responsive web application",
        "skill": "web",
        "time_limit_minutes": 120,
        "deliverables": ["Repository URL", "Deployed preview URL"],
        "requirements": [
            {
                "id": "1",
                "title": "Responsive Design",
                "description": "Works on mobile, tablet, and desktop devices",
                "points": 20,
                "category": "design",
            },
            {
                "id": "2",
                "title": "Modern CSS",
                "description": "Use modern CSS features like Grid, Flexbox, or CSS-in-JS",
                "points": 15,
                "category": "design",
            },
            {
                "id": "3",
                "title": "Interactive Features",
                "description": "Include user interactions, animations, or dynamic content",
                "points": 25,
                "category": "functionality",
            },
            {
                "id": "4",
                "title": "Code Quality",
                "description": "Clean, well-structured, and commented code",
                "points": 20,
                "category": "quality",
            },
            {
                "id": "5",
                "title": "Performance",
                "description": "Optimized images, efficient code, fast loading times",
                "required": False,
                "points": 10,
                "category": "quality",
            },
            {
                "id": "6",
                "title": "Accessibility",
                "description": "WCAG compliance, semantic HTML, keyboard navigation",
                "required": False,
                "points": 10,
                "category": "quality",
            },
        ],
    },
]

BUILTIN_TESTS: tuple[TestDefinition, ...] = tuple(parse_test(d) for d in _DEFINITIONS)

# Roadmap step skill or category -> gating test id
SKILL_TESTS: dict[str, str] = {
    "react": "react-basics-mcq",
    "javascript": "javascript-algorithms-coding",
    "css": "css-layout-mcq",
    "nodejs": "node-api-coding",
    "ui-design": "ui-design-project",
    "business": "business-strategy-mcq",
    "web": "web-app-project",
}

DEFAULT_TEST_ID = "react-basics-mcq"
