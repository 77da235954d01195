from gophkeeper.main import run

run()
