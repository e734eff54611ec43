import os
import sys

from dotenv import load_dotenv


# Get the parent directory and add it to sys.path
parent_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, parent_dir)

# ANOMALIZE_* overrides for local test runs
load_dotenv()
