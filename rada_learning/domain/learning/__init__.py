"""
Learning bounded context - Domain layer.

This context owns the progression and gamification rules:
- Sequential lesson unlocking and module completion
- Timed quiz attempts and deterministic scoring
- The append-only XP ledger
- Conjunctive badge rules over learner statistics
- Time-boxed, capacity-bounded challenges

Aggregates:
- ModuleProgress: a learner's lesson states within one module
- QuizAttempt: a single timed attempt at a quiz
"""
