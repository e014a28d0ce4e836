"""
Offline assistant answers.

Used when the assistant endpoint is not configured or cannot be reached.
Matches keywords in the user's message against a fixed set of portal
topics and returns a canned answer with follow-up suggestions.
"""

from typing import List, Tuple

from campverse.types import AssistantReply, Suggestion


class KeywordResponder:
    """
    Answers common portal questions from keywords.

    Rules are checked in order; the first rule with a keyword contained in
    the lower-cased message wins.
    """

    RULES: List[Tuple[Tuple[str, ...], str, List[str]]] = [
        (
            ("schedule", "timetable"),
            "You can find your schedule by clicking on 'Schedule' in the sidebar. "
            "It shows your daily classes, timings, and upcoming events.",
            ["Show me assignments", "Where are my grades?", "Help with attendance"],
        ),
        (
            ("assignment", "homework"),
            "Assignments can be found in the 'Assignments' section in your sidebar. "
            "You can view pending assignments, submit work, and track deadlines there.",
            ["How to submit assignments?", "Check my grades", "View schedule"],
        ),
        (
            ("fee", "payment"),
            "You can manage your fees in the 'Fees' section. View academic, hostel "
            "and transport fees, and make payments online.",
            ["How to pay fees?", "Check fee status", "Payment history"],
        ),
        (
            ("grade", "marks", "result"),
            "Your grades and results are available in the 'Grades' section. You can "
            "view semester-wise performance, GPA, and detailed subject marks.",
            ["Calculate GPA", "View attendance", "Check assignments"],
        ),
        (
            ("college", "university", "campus"),
            "CampVerse is your college management platform: courses, attendance, "
            "grades, events, clubs and placements in one place.",
            ["Contact information", "Faculty details", "Campus facilities"],
        ),
        (
            ("dsa", "algorithm", "data structure"),
            "For Data Structures and Algorithms, practice regularly on platforms like "
            "LeetCode and HackerRank. Start with arrays, linked lists, trees, and graphs.",
            ["Array problems", "Tree algorithms", "Practice resources"],
        ),
        (
            ("coding", "programming"),
            "To improve at coding, practice regularly, build projects, and take part "
            "in coding contests. Focus on clean code and problem-solving patterns.",
            ["Project ideas", "Coding contests", "Best practices"],
        ),
        (
            ("career", "job", "placement"),
            "For career growth, build strong technical skills, work on real projects, "
            "keep your GitHub profile up to date, and prepare for interviews. Check "
            "the Placements section for job opportunities.",
            ["Interview tips", "Resume building", "Skill development"],
        ),
    ]

    DEFAULT_CONTENT = (
        "I'm here to help you navigate CampVerse and with your academic journey. "
        "Ask me about navigation, features, college information, career guidance, "
        "or topics like DSA and coding. What would you like to know?"
    )

    DEFAULT_SUGGESTIONS = [
        "Show me around the dashboard",
        "Help with assignments",
        "Career guidance",
        "Study tips",
    ]

    @staticmethod
    def _suggestions(texts: List[str]) -> List[Suggestion]:
        return [Suggestion(id=str(i), text=text) for i, text in enumerate(texts, start=1)]

    def respond(self, message: str) -> AssistantReply:
        """
        Answer a message without the assistant endpoint.

        Args:
            message: The user's message

        Returns:
            Canned reply with suggestions; metadata.model is "offline"
        """
        lower_message = message.lower()

        for keywords, content, suggestions in self.RULES:
            if any(keyword in lower_message for keyword in keywords):
                return AssistantReply(
                    content=content,
                    suggestions=self._suggestions(suggestions),
                    metadata={"model": "offline", "intent": keywords[0]},
                )

        return AssistantReply(
            content=self.DEFAULT_CONTENT,
            suggestions=self._suggestions(self.DEFAULT_SUGGESTIONS),
            metadata={"model": "offline", "intent": "general"},
        )
