"""Screens of the terminal browser: dashboard, search prompt and results, observation detail."""