from storytyper.app import run

run()
