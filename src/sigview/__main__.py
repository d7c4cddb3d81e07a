from sigview.main import run

run()
