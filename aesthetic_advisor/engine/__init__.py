"""
Diagnostic engine: sequencing, scoring, ranking and auxiliary estimates.

Modules
-------
sequencer : build_sequence() + current_question() + advance() — question
            order and branch resolution over an explicit SessionState.
scoring   : apply_answer() + is_negative_response() — pure score/elimination
            deltas from the relation matrix.
ranking   : rank() + ranking_confidence() + explain_candidate().
estimator : estimate_profile() — age bracket and primary concern, cosmetic.
session   : DiagnosticSession — the public facade tying the above together.
"""
