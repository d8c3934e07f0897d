from rpcscope.cli import main

main()
