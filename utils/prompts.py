"""
Prompts para generación de SQL, compartidos por todos los proveedores.
"""

from typing import List, Optional, Sequence

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from core.domain.query import HistoryEntry, SQLGenerationRequest

MAX_HISTORY = 3

SQL_GENERATION_SYSTEM_PROMPT = """You are an expert PostgreSQL database assistant. Your task is to convert natural language questions into accurate, efficient SQL queries.

IMPORTANT RULES:
1. Generate ONLY SELECT queries (or WITH ... SELECT for CTEs) - never INSERT, UPDATE, DELETE, DROP, or any data modification statements
2. Use the provided database schema to write accurate queries
3. Include appropriate JOINs when data from multiple tables is needed
4. Use proper column and table names exactly as they appear in the schema
5. Add LIMIT clause when appropriate to prevent excessive data retrieval
6. Use meaningful aliases for better readability
7. Handle NULL values appropriately
8. Use appropriate WHERE clauses based on the user's question

OUTPUT FORMAT:
Return your response in the following JSON format:
{
  "sql": "YOUR SQL QUERY HERE",
  "explanation": "Brief explanation of what the query does and why you structured it this way",
  "confidence": "high|medium|low"
}

Use "high" confidence when the question clearly maps to the schema.
Use "medium" when you made some assumptions.
Use "low" when the question is ambiguous or schema coverage is uncertain.

REMEMBER: Only output valid JSON, no additional text before or after."""


def build_user_prompt(
    natural_language_query: str,
    schema_context: str,
    previous_queries: Optional[Sequence[HistoryEntry]] = None,
) -> str:
    """Schema, historial reciente (máx. 3) y la pregunta del usuario"""
    prompt = f"{schema_context}\n\n"

    if previous_queries:
        prompt += "PREVIOUS QUERIES FOR CONTEXT:\n"
        for entry in list(previous_queries)[-MAX_HISTORY:]:
            prompt += f"User: {entry.question}\nSQL: {entry.sql}\n\n"

    prompt += f"USER QUESTION: {natural_language_query}\n\n"
    prompt += "Generate the SQL query:"

    return prompt


def build_messages(request: SQLGenerationRequest) -> List[BaseMessage]:
    return [
        SystemMessage(content=SQL_GENERATION_SYSTEM_PROMPT),
        HumanMessage(
            content=build_user_prompt(
                request.natural_language_query,
                request.schema_context,
                request.previous_queries,
            )
        ),
    ]
