"""GraphQL documents issued against the Pipefy API.

Mutations that take optional attributes receive a single ``$input`` object so that
attributes left out of the desired state are simply absent from the request.
"""

from __future__ import annotations

# pipes
CREATE_PIPE = (
    "mutation($input:CreatePipeInput!){ createPipe(input:$input){ "
    "clientMutationId pipe{ id name public organization{ id } } } }"
)
READ_PIPE = "query($id:ID!){ pipe(id:$id){ id name public organization{ id } } }"
UPDATE_PIPE = (
    "mutation($input:UpdatePipeInput!){ updatePipe(input:$input){ "
    "pipe{ id name public } } }"
)
DELETE_PIPE = "mutation($id:ID!){ deletePipe(input:{id:$id}){ success } }"
PIPE_PHASES = "query($id:ID!){ pipe(id:$id){ id phases { id } } }"
PIPE_UUID = "query($id:ID!){ pipe(id:$id){ uuid } }"

# phases
CREATE_PHASE = (
    "mutation($input:CreatePhaseInput!){ createPhase(input:$input){ "
    "phase{ id name } } }"
)
READ_PHASE = "query($id:ID!){ phase(id:$id){ id name pipe{ id } } }"
UPDATE_PHASE = (
    "mutation($input:UpdatePhaseInput!){ updatePhase(input:$input){ phase{ id name } } }"
)
DELETE_PHASE = "mutation($id:ID!){ deletePhase(input:{id:$id}){ clientMutationId success } }"
PHASE_REPO_ID = "query($id:ID!){ phase(id:$id){ repo_id } }"

# fields
CREATE_FIELD = (
    "mutation($input:CreatePhaseFieldInput!){ createPhaseField(input:$input){ "
    "phase_field{ id internal_id label type required } } }"
)
PHASE_FIELDS = (
    "query($phaseId:ID!){ phase(id:$phaseId){ fields{ id internal_id label type required } } }"
)
UPDATE_FIELD = (
    "mutation($input:UpdatePhaseFieldInput!){ updatePhaseField(input:$input){ "
    "phase_field{ id internal_id label required } } }"
)
DELETE_FIELD = (
    "mutation($id:ID!,$pipeUuid:ID!){ deletePhaseField(input:{ id:$id, pipeUuid:$pipeUuid }){ "
    "success } }"
)

# automations
_AUTOMATION_ERRORS = "error_details{ object_name object_key messages }"
CREATE_AUTOMATION = (
    "mutation($input:CreateAutomationInput!){ createAutomation(input:$input){ "
    f"automation{{ id name action_id event_id active }} {_AUTOMATION_ERRORS} }} }}"
)
READ_AUTOMATION = (
    "query($id:ID!){ automation(id:$id){ id name action_id event_id active "
    "event_repo{ __typename id } "
    "action_repo_v2{ __typename ... on Pipe{ id } ... on Table{ id } } } }"
)
UPDATE_AUTOMATION = (
    "mutation($input:UpdateAutomationInput!){ updateAutomation(input:$input){ "
    f"automation{{ id name action_id event_id active }} {_AUTOMATION_ERRORS} }} }}"
)
DELETE_AUTOMATION = "mutation($id:ID!){ deleteAutomation(input:{id:$id}){ success } }"
