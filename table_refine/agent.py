"""Table Refiner Agent — ADK entry point.

Exports root_agent as required by the Google ADK framework.
Run with: adk web table_refine
"""

import os

from dotenv import load_dotenv
from google.adk.agents import Agent
from google.adk.tools.function_tool import FunctionTool

from table_refine.config import Config, configure_logging
from table_refine.prompts.refiner import REFINER_PROMPT
from table_refine.tools import refining

load_dotenv()
configure_logging(os.getenv("TABLE_REFINE_LOG_LEVEL"))

root_agent = Agent(
    name="TableRefiner",
    description=(
        "Cleans in-memory tables with declarative operations: filters rows "
        "and columns by index or value, replaces cells, interprets strings "
        "as numbers, booleans and dates, and transposes."
    ),
    model=os.getenv("DEFAULT_MODEL", Config.DEFAULT_MODEL),
    instruction=REFINER_PROMPT,
    tools=[
        FunctionTool(func=refining.register_table),
        FunctionTool(func=refining.refine_table),
        FunctionTool(func=refining.sample_table),
        FunctionTool(func=refining.list_tables),
    ],
)
