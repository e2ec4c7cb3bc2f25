from subconvert.cli import app

app()
