# Routes package init
"""
Questions Portal Backend — API Routes Package
==============================================

Route Inventory:
    - questions.py: GET/POST/PATCH/DELETE /api/questions[...]
                    POST /api/questions/{id}/encounters
    - votes.py:     GET /api/questions/{id}/vote, POST/PATCH/DELETE /api/votes[...]
    - health.py:    GET /health

Routes stay thin: they resolve the caller, hand validated input to a
service, and return what the service returns. Business rules live in
app/services.
"""
