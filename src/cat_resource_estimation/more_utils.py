# Copyright 2025 The cat-resource-estimation Authors
#
# Licensed under the Apache License, Version 2.0 (the "License"); you may not use this file except in compliance
# with the License. You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software distributed under the License
# is distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express
# or implied. See the License for the specific language governing permissions and limitations under
# the License.

"""
**Module** ``cat_resource_estimation.more_utils``

Helper tools for sweeping configurations and gathering CRE's CSV results.
"""
from typing import Union, Any, Dict
from pathlib import Path
import pandas as pd


def update(dictionary: Dict[str, Any], path: str, value: Any) -> None:
    """Update a dictionary's value at the key specified by a period separated string.

    For example, update(params, "elliptic_curve.bit_size", 128) updates params, in place, by setting
    params["elliptic_curve"]["bit_size"] = 128. Missing intermediate levels are created.

    :param dictionary: dictionary to be updated.
    :param path: path to key, specified as a period separated string.
    :param value: new value of the dictionary at the key specified by path.
    """
    *parents, leaf = path.split(".")
    current = dictionary
    for key in parents:
        if current.get(key) is None:
            current[key] = {}
        current = current[key]
    current[leaf] = value


def combine_csvs(csv_path: Union[str, Path], csv_out_name: str) -> Path:
    """Concatenate all csv files in the csv_path directory, except a previous combined output.

    :param csv_path: path to directory containing result csvs.
    :param csv_out_name: file name for the combined csv file.

    :returns: the path of the combined csv file.
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"No results directory at {csv_path}.")
    out_path = csv_path / csv_out_name
    files = sorted(file for file in csv_path.glob("**/*.csv") if file.is_file() and file != out_path)
    if not files:
        raise FileNotFoundError(f"No CSV results to combine in {csv_path}.")
    dfs = [pd.read_csv(file, index_col=False) for file in files]
    df = pd.concat(dfs)
    df.to_csv(out_path, index=False)
    return out_path
