import sys

from paperless.chain import Status, parse_script, run_cmd_chain
from paperless.chain.runtime import ChainRuntime

script = """
# copy the input through a sandbox temp file and count its words
cat $input > $tmpCopy
wc -w $tmpCopy
"""

chain = parse_script(script)
runtime = ChainRuntime.from_global_config()
status: Status = runtime.status_for(chain, {"input": sys.argv[1] if len(sys.argv) > 1 else __file__})

try:
    run_cmd_chain(chain, status)
finally:
    print(status.log.getvalue().decode("utf-8", errors="replace"))
