"""
Agents used by the dialogue runtime.

- transitions: the pure state machine (state, intent) -> (next state, handler)
- dialogue_controller: DialogueController, which runs one turn end to end
"""
