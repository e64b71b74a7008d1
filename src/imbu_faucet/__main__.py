from imbu_faucet.main import entrypoint

entrypoint()
