from suitest.cli import app

app()
